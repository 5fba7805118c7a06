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


class ProcessorException(Exception):
    """
    Base class for errors that route the incoming flow file to the failure relationship.
    """


class ConfigurationError(ProcessorException):
    """
    A required property is not set or is empty.
    """


class ResolutionError(ProcessorException):
    """
    Expression language evaluation of a property failed or produced an empty value.
    """


class WriteError(ProcessorException):
    """
    Writing the content of an outgoing flow file failed.
    """
