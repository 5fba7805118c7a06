#
#  Licensed to the Apache Software Foundation (ASF) under one or more
#  contributor license agreements.  See the NOTICE file distributed with
#  this work for additional information regarding copyright ownership.
#  The ASF licenses this file to You under the Apache License, Version 2.0
#  (the "License"); you may not use this file except in compliance with
#  the License.  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
#

import yaml

from mapperui.api.processorbase import ProcessorBase
from mapperui.api.properties import PropertyDescriptor
from mapperui.api.relationship import Relationship


class ProcessorManifest:
    def __init__(self, processor: ProcessorBase):
        details = getattr(processor, 'ProcessorDetails', None)
        self.type: str = processor.__class__.__name__
        self.version: str | None = getattr(details, 'version', None)
        self.description: str = getattr(details, 'description', self.type)
        self.tags: list[str] = list(getattr(details, 'tags', []))
        self.input_requirement: str = getattr(details, 'input_requirement', 'INPUT_ALLOWED')
        self.side_effect_free: bool = getattr(details, 'side_effect_free', False)
        self.supports_batching: bool = getattr(details, 'supports_batching', False)
        self.writes_attributes: dict[str, str] = dict(getattr(details, 'writes_attributes', {}))
        self.properties: list[PropertyDescriptor] = processor.getPropertyDescriptors()
        self.relationships: list[Relationship] = processor.getRelationships()

    def __repr__(self):
        return f"({self.type}, {self.version}, {[p.name for p in self.properties]}, {[r.name for r in self.relationships]})"

    @staticmethod
    def _property_to_dict(descriptor: PropertyDescriptor) -> dict:
        data = {
            'name': descriptor.name,
            'display name': descriptor.displayName,
            'description': descriptor.description,
            'required': descriptor.required,
            'sensitive': descriptor.sensitive,
            'expression language scope': descriptor.expressionLanguageScope.name,
        }
        if descriptor.defaultValue is not None:
            data['default value'] = descriptor.defaultValue
        if descriptor.allowableValues:
            data['allowable values'] = list(descriptor.allowableValues)
        return data

    def to_dict(self) -> dict:
        data = {
            'type': self.type,
            'version': self.version,
            'description': self.description,
            'tags': self.tags,
            'input requirement': self.input_requirement,
            'side effect free': self.side_effect_free,
            'supports batching': self.supports_batching,
            'Properties': [self._property_to_dict(p) for p in self.properties],
            'Relationships': [{'name': r.name, 'description': r.description} for r in self.relationships],
        }
        if self.writes_attributes:
            data['Writes Attributes'] = [{'name': name, 'description': description}
                                         for name, description in self.writes_attributes.items()]
        return data

    def to_yaml(self) -> str:
        return yaml.dump(self.to_dict(), sort_keys=False, indent=2, width=120)
