# Licensed to the Apache Software Foundation (ASF) under one or more
# contributor license agreements.  See the NOTICE file distributed with
# this work for additional information regarding copyright ownership.
# The ASF licenses this file to You under the Apache License, Version 2.0
# (the "License"); you may not use this file except in compliance with
# the License.  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from enum import Enum
from typing import List, Dict
from .host import FlowFile as HostFlowFile
from .host import ProcessContext as HostProcessContext
from .host import ProcessSession


class StandardValidators:
    ALWAYS_VALID = 0
    NON_EMPTY_VALIDATOR = 1
    INTEGER_VALIDATOR = 2
    LONG_VALIDATOR = 7
    PORT_VALIDATOR = 8
    NON_EMPTY_EL_VALIDATOR = 9
    BOOLEAN_VALIDATOR = 11
    TIME_PERIOD_VALIDATOR = 16
    DATA_SIZE_VALIDATOR = 17


class HostPropertyTypes:
    INTEGER_TYPE = 0
    LONG_TYPE = 1
    BOOLEAN_TYPE = 2
    DATA_SIZE_TYPE = 3
    TIME_PERIOD_TYPE = 4
    NON_BLANK_TYPE = 5
    PORT_TYPE = 6


_VALIDATOR_PROPERTY_TYPES = {
    StandardValidators.INTEGER_VALIDATOR: HostPropertyTypes.INTEGER_TYPE,
    StandardValidators.LONG_VALIDATOR: HostPropertyTypes.LONG_TYPE,
    StandardValidators.BOOLEAN_VALIDATOR: HostPropertyTypes.BOOLEAN_TYPE,
    StandardValidators.DATA_SIZE_VALIDATOR: HostPropertyTypes.DATA_SIZE_TYPE,
    StandardValidators.TIME_PERIOD_VALIDATOR: HostPropertyTypes.TIME_PERIOD_TYPE,
    StandardValidators.NON_EMPTY_VALIDATOR: HostPropertyTypes.NON_BLANK_TYPE,
    StandardValidators.NON_EMPTY_EL_VALIDATOR: HostPropertyTypes.NON_BLANK_TYPE,
    StandardValidators.PORT_VALIDATOR: HostPropertyTypes.PORT_TYPE,
}


def translateStandardValidatorToHostPropertyType(validators: List[int]) -> int:
    # The host only accepts a single type per property
    if validators is None or len(validators) != 1:
        return None
    return _VALIDATOR_PROPERTY_TYPES.get(validators[0])


class ExpressionLanguageScope(Enum):
    NONE = 1
    ENVIRONMENT = 2
    FLOWFILE_ATTRIBUTES = 3


class PropertyDescriptor:
    def __init__(self, name: str, description: str, required: bool = False, sensitive: bool = False,
                 display_name: str = None, default_value: str = None, allowable_values: List[str] = None,
                 expression_language_scope: ExpressionLanguageScope = ExpressionLanguageScope.NONE,
                 dynamic: bool = False, validators: List[int] = None, controller_service_definition: str = None):
        if validators is None:
            validators = [StandardValidators.ALWAYS_VALID]

        self.name = name
        self.description = description
        self.required = required
        self.sensitive = sensitive
        self.displayName = display_name if display_name is not None else name
        self.defaultValue = default_value
        self.allowableValues = allowable_values
        self.expressionLanguageScope = expression_language_scope
        self.dynamic = dynamic
        self.validators = validators
        self.controllerServiceDefinition = controller_service_definition

    def supportsExpressionLanguage(self) -> bool:
        return self.expressionLanguageScope != ExpressionLanguageScope.NONE


class FlowFile:
    def __init__(self, session: ProcessSession, host_flow_file: HostFlowFile):
        self.session = session
        self.host_flow_file = host_flow_file

    def getContentsAsBytes(self):
        return self.session.getContentsAsBytes(self.host_flow_file)

    def getAttribute(self, name: str):
        return self.host_flow_file.getAttribute(name)

    def getSize(self):
        return self.host_flow_file.getSize()

    def getAttributes(self):
        return self.host_flow_file.getAttributes()


class PythonPropertyValue:
    def __init__(self, host_context: HostProcessContext, name: str, string_value: str, el_supported: bool, is_dynamic: bool = False):
        self.host_context = host_context
        self.value = string_value
        self.name = name
        self.el_supported = el_supported
        self.is_dynamic = is_dynamic

    def getValue(self) -> str:
        return self.value

    def isSet(self) -> bool:
        return self.value is not None

    def evaluateAttributeExpressions(self, flow_file: FlowFile = None):
        # Without expression language support the raw value is already final, so skip the round trip to the host
        if not self.el_supported or not self.value:
            return self

        host_flow_file = flow_file.host_flow_file if flow_file is not None else None
        if self.is_dynamic:
            new_string_value = self.host_context.getDynamicProperty(self.name, host_flow_file)
        else:
            new_string_value = self.host_context.getProperty(self.name, host_flow_file)
        return PythonPropertyValue(self.host_context, self.name, new_string_value, self.el_supported, self.is_dynamic)


class ProcessContext:
    def __init__(self, host_context: HostProcessContext, processor):
        self.host_context = host_context
        self.processor = processor

    def getProperty(self, descriptor) -> PythonPropertyValue:
        if descriptor is None:
            return None
        if isinstance(descriptor, str):
            property_name = descriptor
            expression_language_support = True
        else:
            property_name = descriptor.name
            expression_language_support = descriptor.supportsExpressionLanguage()
        is_dynamic = False
        property_value = self.host_context.getRawProperty(property_name)
        if property_value is None and self.processor.supports_dynamic_properties:
            property_value = self.host_context.getRawDynamicProperty(property_name)
            if property_value is not None:
                is_dynamic = True
        return PythonPropertyValue(self.host_context, property_name, property_value, expression_language_support, is_dynamic)

    def getName(self) -> str:
        return self.host_context.getName()

    def getProperties(self) -> Dict[PropertyDescriptor, str]:
        properties = dict()
        host_properties = self.host_context.getProperties()

        for property_descriptor in self.processor.getPropertyDescriptors():
            if property_descriptor.name in host_properties:
                properties[property_descriptor] = host_properties[property_descriptor.name]

        return properties
