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

"""
In-memory host for running a processor without a dataflow engine.

ProcessorRunner plays the engine's part: it loads the processor, holds property values,
queues incoming flow files, triggers the processor and keeps whatever got routed.
"""

from __future__ import annotations

import io
import logging
import re
import uuid
from collections import deque

from mapperui.api import host
from mapperui.api.processorbase import ProcessorBase
from mapperui.api.relationship import Relationship


logger = logging.getLogger(__name__)


class ExpressionLanguageException(Exception):
    pass


class FlowFileHandlingException(Exception):
    pass


_EXPRESSION = re.compile(r"\$\{([^${}]*)\}")
_ATTRIBUTE_NAME = re.compile(r"^\s*([A-Za-z0-9_.\-]+)\s*$")


def evaluate_expression(expression: str, attributes: dict[str, str]) -> str:
    """Substitutes ${attribute} references. Missing attributes evaluate to an empty string."""
    def substitute(match: re.Match) -> str:
        attribute = _ATTRIBUTE_NAME.match(match.group(1))
        if not attribute:
            raise ExpressionLanguageException(f"Unsupported expression '{match.group(0)}'")
        return attributes.get(attribute.group(1), "")

    if "${" in _EXPRESSION.sub("", expression):
        raise ExpressionLanguageException(f"Unterminated expression in '{expression}'")
    return _EXPRESSION.sub(substitute, expression)


class MockOutputStream(host.OutputStream):
    def __init__(self):
        self.buffer = io.BytesIO()

    def write(self, content: bytes) -> int:
        return self.buffer.write(content)


class MockFlowFile(host.FlowFile):
    def __init__(self, content: bytes = b"", attributes: dict[str, str] | None = None):
        self.id: str = str(uuid.uuid4())
        self.content: bytes = content
        self.attributes: dict[str, str] = dict(attributes) if attributes else {}
        self.attributes.setdefault("uuid", self.id)

    def __repr__(self):
        return f"({self.id}, {self.attributes}, {self.content!r})"

    def getAttribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def getAttributes(self) -> dict[str, str]:
        return dict(self.attributes)

    def addAttribute(self, name: str, value: str) -> bool:
        if name in self.attributes:
            return False
        self.attributes[name] = value
        return True

    def setAttribute(self, name: str, value: str) -> bool:
        self.attributes[name] = value
        return True

    def getSize(self) -> int:
        return len(self.content)


class MockProcessSession(host.ProcessSession):
    def __init__(self, queue: deque[MockFlowFile]):
        self.queue = queue
        self.created: list[MockFlowFile] = []
        self.removed: list[MockFlowFile] = []
        self.transfers: list[tuple[MockFlowFile, str]] = []
        self.taken: list[MockFlowFile] = []

    def get(self) -> MockFlowFile | None:
        if not self.queue:
            return None
        flow_file = self.queue.popleft()
        self.taken.append(flow_file)
        return flow_file

    def create(self, parent: MockFlowFile = None) -> MockFlowFile:
        attributes = None
        if parent is not None:
            attributes = {name: value for name, value in parent.getAttributes().items() if name != "uuid"}
        flow_file = MockFlowFile(attributes=attributes)
        self.created.append(flow_file)
        return flow_file

    def write(self, flow_file: MockFlowFile, callback):
        output_stream = MockOutputStream()
        callback.process(output_stream)
        flow_file.content = output_stream.buffer.getvalue()

    def transfer(self, flow_file: MockFlowFile, relationship):
        name = relationship.name if isinstance(relationship, Relationship) else str(relationship)
        self.transfers.append((flow_file, name))

    def transferToCustomRelationship(self, flow_file: MockFlowFile, relationship_name: str):
        self.transfers.append((flow_file, relationship_name))

    def remove(self, flow_file: MockFlowFile):
        self.removed.append(flow_file)

    def getContentsAsBytes(self, flow_file: MockFlowFile) -> bytes:
        return flow_file.content

    def commit(self) -> list[tuple[MockFlowFile, str]]:
        routed_ids = [flow_file.id for flow_file, _ in self.transfers]
        for flow_file in self.taken + self.created:
            if flow_file in self.removed:
                if flow_file.id in routed_ids:
                    raise FlowFileHandlingException(f"{flow_file} was both removed and transferred")
                continue
            count = routed_ids.count(flow_file.id)
            if count != 1:
                raise FlowFileHandlingException(f"{flow_file} was transferred {count} times, expected exactly once")
        return self.transfers


class MockProcessContext(host.ProcessContext):
    def __init__(self, name: str, properties: dict[str, str], dynamic_property_names: set[str]):
        self.name = name
        self.properties = properties
        self.dynamic_property_names = dynamic_property_names

    def getRawProperty(self, name: str) -> str | None:
        if name in self.dynamic_property_names:
            return None
        return self.properties.get(name)

    def getRawDynamicProperty(self, name: str) -> str | None:
        if name not in self.dynamic_property_names:
            return None
        return self.properties.get(name)

    def getProperty(self, name: str, flow_file: MockFlowFile = None) -> str | None:
        value = self.getRawProperty(name)
        if value is None:
            return None
        return evaluate_expression(value, flow_file.getAttributes() if flow_file is not None else {})

    def getDynamicProperty(self, name: str, flow_file: MockFlowFile = None) -> str | None:
        value = self.getRawDynamicProperty(name)
        if value is None:
            return None
        return evaluate_expression(value, flow_file.getAttributes() if flow_file is not None else {})

    def getProperties(self) -> dict[str, str]:
        return {name: value for name, value in self.properties.items() if name not in self.dynamic_property_names}

    def getName(self) -> str:
        return self.name


class MockProcessor(host.Processor):
    def __init__(self):
        self.description: str | None = None
        self.version: str | None = None
        self.supports_dynamic_properties = False
        self.properties: dict[str, dict] = {}
        self.relationships: dict[str, str] = {}

    def setDescription(self, description: str):
        self.description = description

    def setVersion(self, version: str):
        self.version = version

    def setSupportsDynamicProperties(self):
        self.supports_dynamic_properties = True

    def addProperty(self, name, description, default_value, is_required, el_supported, is_sensitive, property_type_code,
                    allowable_values, controller_service_definition):
        self.properties[name] = {
            'description': description,
            'default value': default_value,
            'required': is_required,
            'expression language supported': el_supported,
            'sensitive': is_sensitive,
            'property type': property_type_code,
            'allowable values': allowable_values,
            'controller service': controller_service_definition,
        }

    def addRelationship(self, name: str, description: str):
        self.relationships[name] = description


class ProcessorRunner:
    def __init__(self, processor: ProcessorBase, name: str | None = None):
        self.processor = processor
        self.name = name if name else processor.__class__.__name__
        self.processor.logger = logging.getLogger(f"mapperui.{processor.__class__.__name__}")
        self.processor.REL_SUCCESS = Relationship("success")
        self.processor.REL_FAILURE = Relationship("failure")
        self.processor.REL_ORIGINAL = Relationship("original")

        self.host_processor = MockProcessor()
        self.processor.describe(self.host_processor)
        self.processor.onInitialize(self.host_processor)

        self.properties: dict[str, str] = {}
        self.dynamic_property_names: set[str] = set()
        self.queue: deque[MockFlowFile] = deque()
        self.routed: dict[str, list[MockFlowFile]] = {}
        self.removed: list[MockFlowFile] = []
        self.created: list[MockFlowFile] = []
        self.context: MockProcessContext | None = None

    def setProperty(self, name: str, value: str):
        if name not in self.host_processor.properties:
            if not self.host_processor.supports_dynamic_properties:
                raise KeyError(f"Processor '{self.name}' has no property named '{name}'")
            self.dynamic_property_names.add(name)
        self.properties[name] = value

    def enqueue(self, content: bytes | str = b"", attributes: dict[str, str] | None = None) -> MockFlowFile:
        if isinstance(content, str):
            content = content.encode("utf-8")
        flow_file = MockFlowFile(content, attributes)
        self.queue.append(flow_file)
        return flow_file

    def run(self, iterations: int = 1):
        self.context = MockProcessContext(self.name, self.properties, self.dynamic_property_names)
        self.processor.onSchedule(self.context)
        for _ in range(iterations):
            session = MockProcessSession(self.queue)
            self.processor.onTrigger(self.context, session)
            for flow_file, relationship_name in session.commit():
                self.routed.setdefault(relationship_name, []).append(flow_file)
            self.created.extend(session.created)
            self.removed.extend(session.removed)
            logger.debug("Trigger of '%s' routed %d flow file(s)", self.name, len(session.transfers))

    def getFlowFilesForRelationship(self, relationship_name: str) -> list[MockFlowFile]:
        return self.routed.get(relationship_name, [])

    def assertAllFlowFilesTransferred(self, relationship_name: str, count: int | None = None):
        for name, flow_files in self.routed.items():
            if name != relationship_name and flow_files:
                raise AssertionError(f"{len(flow_files)} flow file(s) routed to '{name}', expected all to go to '{relationship_name}'")
        if count is not None:
            self.assertTransferCount(relationship_name, count)

    def assertTransferCount(self, relationship_name: str, count: int):
        actual = len(self.getFlowFilesForRelationship(relationship_name))
        if actual != count:
            raise AssertionError(f"Expected {count} flow file(s) routed to '{relationship_name}', but got {actual}")
