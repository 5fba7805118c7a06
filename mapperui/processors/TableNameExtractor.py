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

from mapperui.api.exceptions import ConfigurationError, ResolutionError
from mapperui.api.flowfiletransform import FlowFileTransform, FlowFileTransformResult
from mapperui.api.properties import ExpressionLanguageScope, PropertyDescriptor, StandardValidators
from mapperui.api.relationship import Relationship


class TableNameExtractor(FlowFileTransform):
    class ProcessorDetails:
        version = '0.0.1'
        description = "Writes the configured table name, evaluated against the incoming flow file's attributes, " \
                      "to a new flow file routed to 'sql'. The incoming flow file is routed to 'original'."
        tags = ['example']
        input_requirement = 'INPUT_REQUIRED'
        side_effect_free = True
        supports_batching = True
        writes_attributes = {'mime.type': 'Sets mime.type of FlowFile to sql'}

    MIME_TYPE = 'sql'

    TABLE_NAME = PropertyDescriptor(
        name='Table Name',
        description='The name of the table to be created.',
        required=True,
        expression_language_scope=ExpressionLanguageScope.FLOWFILE_ATTRIBUTES,
        validators=[StandardValidators.NON_EMPTY_VALIDATOR]
    )

    ORIGINAL = Relationship(
        name='original',
        description='The incoming flow file is routed to this relationship, unmodified, once the table name flow file has been created')
    SQL = Relationship(
        name='sql',
        description='A new flow file holding the evaluated table name as its content is routed to this relationship')
    FAILURE = Relationship(
        name='failure',
        description='The incoming flow file is routed to this relationship if the table name is not set, '
                    'cannot be evaluated, or cannot be written')

    def getPropertyDescriptors(self):
        return [self.TABLE_NAME]

    def getRelationships(self):
        return [self.ORIGINAL, self.SQL, self.FAILURE]

    def transform(self, context, flowFile):
        table_name_value = context.getProperty(self.TABLE_NAME)
        if not table_name_value.getValue():
            raise ConfigurationError("'{}' property is not set".format(self.TABLE_NAME.name))

        try:
            table_name = table_name_value.evaluateAttributeExpressions(flowFile).getValue()
        except Exception as exception:
            raise ResolutionError("Could not evaluate '{}' property value '{}': {}".format(
                self.TABLE_NAME.name, table_name_value.getValue(), exception)) from exception

        if not table_name:
            raise ResolutionError("'{}' property value '{}' evaluated to an empty table name".format(
                self.TABLE_NAME.name, table_name_value.getValue()))

        self.logger.debug("Resolved table name '{}'".format(table_name))
        return FlowFileTransformResult(relationship=self.SQL.name, attributes={'mime.type': self.MIME_TYPE}, contents=table_name)
