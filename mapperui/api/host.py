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

"""
Capabilities the hosting dataflow engine hands to a processor.

The engine owns scheduling, FlowFile storage and expression evaluation. A processor
only talks to it through the objects below, so any implementation of them (the
native bindings, or the in-memory host in mapperui.mock) can drive a processor.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class Logger(ABC):
    """Logger the engine injects into a processor; a logging.Logger satisfies it."""

    @abstractmethod
    def debug(self, msg, *args):
        pass

    @abstractmethod
    def warning(self, msg, *args):
        pass

    @abstractmethod
    def error(self, msg, *args):
        pass


class OutputStream(ABC):
    @abstractmethod
    def write(self, content: bytes) -> int:
        pass


class FlowFile(ABC):
    @abstractmethod
    def getAttribute(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def getAttributes(self) -> Dict[str, str]:
        pass

    @abstractmethod
    def addAttribute(self, name: str, value: str) -> bool:
        pass

    @abstractmethod
    def setAttribute(self, name: str, value: str) -> bool:
        pass

    @abstractmethod
    def getSize(self) -> int:
        pass


class ProcessSession(ABC):
    @abstractmethod
    def get(self) -> Optional[FlowFile]:
        pass

    @abstractmethod
    def create(self, parent: FlowFile = None) -> FlowFile:
        """Creates a new FlowFile, inheriting the attributes of parent if given."""

    @abstractmethod
    def write(self, flow_file: FlowFile, callback):
        """Replaces the content of flow_file with what callback.process(OutputStream) writes."""

    @abstractmethod
    def transfer(self, flow_file: FlowFile, relationship):
        pass

    @abstractmethod
    def transferToCustomRelationship(self, flow_file: FlowFile, relationship_name: str):
        pass

    @abstractmethod
    def remove(self, flow_file: FlowFile):
        pass

    @abstractmethod
    def getContentsAsBytes(self, flow_file: FlowFile) -> bytes:
        pass


class ProcessContext(ABC):
    @abstractmethod
    def getRawProperty(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def getRawDynamicProperty(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def getProperty(self, name: str, flow_file: FlowFile = None) -> Optional[str]:
        """Returns the property value with expression language evaluated against flow_file."""

    @abstractmethod
    def getDynamicProperty(self, name: str, flow_file: FlowFile = None) -> Optional[str]:
        pass

    @abstractmethod
    def getProperties(self) -> Dict[str, str]:
        pass

    @abstractmethod
    def getName(self) -> str:
        pass


class Processor(ABC):
    """Registration sink used while the engine loads a processor."""

    @abstractmethod
    def setDescription(self, description: str):
        pass

    @abstractmethod
    def setVersion(self, version: str):
        pass

    @abstractmethod
    def setSupportsDynamicProperties(self):
        pass

    @abstractmethod
    def addProperty(self, name: str, description: str, default_value: Optional[str], is_required: bool, el_supported: bool,
                    is_sensitive: bool, property_type_code: Optional[int], allowable_values: Optional[List[str]],
                    controller_service_definition: Optional[str]):
        pass

    @abstractmethod
    def addRelationship(self, name: str, description: str):
        pass
