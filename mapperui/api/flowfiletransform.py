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

import traceback
from abc import abstractmethod
from .exceptions import ProcessorException, WriteError
from .host import FlowFile, ProcessContext, ProcessSession
from .processorbase import ProcessorBase, WriteCallback
from .properties import FlowFile as FlowFileProxy
from .properties import ProcessContext as ProcessContextProxy


class FlowFileTransformResult:
    def __init__(self, relationship: str, attributes=None, contents=None):
        self.relationship = relationship
        self.attributes = attributes
        if contents is not None and isinstance(contents, str):
            self.contents = contents.encode('utf-8')
        else:
            self.contents = contents

    def getRelationship(self):
        return self.relationship

    def getContents(self):
        return self.contents

    def getAttributes(self):
        return self.attributes


class FlowFileTransform(ProcessorBase):
    """
    Base class for processors that turn one incoming flow file into one outgoing flow file.

    The outgoing flow file is created as a child of the incoming one, so it inherits its
    attributes. On success it is routed to the relationship named by the transform result and
    the untouched incoming flow file goes to 'original'. On any failure the child is dropped and
    only the incoming flow file is routed, to 'failure'.
    """

    def onTrigger(self, context: ProcessContext, session: ProcessSession):
        original_flow_file = session.get()
        if not original_flow_file:
            return

        flow_file_proxy = FlowFileProxy(session, original_flow_file)
        context_proxy = ProcessContextProxy(context, self)
        try:
            result = self.transform(context_proxy, flow_file_proxy)
        except ProcessorException as exception:
            self.logger.error("Failed to transform flow file: {}".format(exception))
            session.transfer(original_flow_file, self.REL_FAILURE)
            return
        except Exception:
            self.logger.error("Failed to transform flow file due to error:\n{}".format(traceback.format_exc()))
            session.transfer(original_flow_file, self.REL_FAILURE)
            return

        if result.getRelationship() == "original":
            self.logger.error("Result relationship cannot be 'original', it is reserved for the original flow file, and transferred automatically in non-failure cases.")
            session.transfer(original_flow_file, self.REL_FAILURE)
            return

        result_attributes = result.getAttributes()
        if result.getRelationship() == "failure":
            if result_attributes is not None:
                for name, value in result_attributes.items():
                    original_flow_file.setAttribute(name, value)
            if result.getContents() is not None:
                self.logger.error("'failure' relationship should not have content, the original flow file will be transferred automatically in this case.")
            session.transfer(original_flow_file, self.REL_FAILURE)
            return

        flow_file = session.create(original_flow_file)
        if result_attributes is not None:
            for name, value in result_attributes.items():
                flow_file.setAttribute(name, value)

        try:
            self.writeContents(session, flow_file, result.getContents())
        except WriteError as exception:
            self.logger.error("Failed to transform flow file: {}".format(exception))
            session.remove(flow_file)
            session.transfer(original_flow_file, self.REL_FAILURE)
            return

        if result.getRelationship() == "success":
            session.transfer(flow_file, self.REL_SUCCESS)
        else:
            session.transferToCustomRelationship(flow_file, result.getRelationship())
        session.transfer(original_flow_file, self.REL_ORIGINAL)

    def writeContents(self, session: ProcessSession, flow_file: FlowFile, contents: bytes):
        if contents is None:
            return
        try:
            session.write(flow_file, WriteCallback(contents))
        except Exception as exception:
            raise WriteError("Writing {} bytes of content failed: {}".format(len(contents), exception)) from exception

    @abstractmethod
    def transform(self, context: ProcessContextProxy, flowFile: FlowFileProxy) -> FlowFileTransformResult:
        pass
