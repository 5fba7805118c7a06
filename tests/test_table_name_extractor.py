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

import unittest
from unittest.mock import MagicMock, patch

from mapperui.api.properties import ExpressionLanguageScope, HostPropertyTypes
from mapperui.mock import MockProcessSession, ProcessorRunner
from mapperui.processors.TableNameExtractor import TableNameExtractor


class TestTableNameExtractor(unittest.TestCase):
    def setUp(self):
        self.runner = ProcessorRunner(TableNameExtractor())

    def test_plain_table_name_is_written_to_sql(self):
        self.runner.setProperty("Table Name", "orders")
        original = self.runner.enqueue('{"id": 1}', {"filename": "input.json"})
        self.runner.run()

        self.runner.assertTransferCount("sql", 1)
        self.runner.assertTransferCount("original", 1)
        self.runner.assertTransferCount("failure", 0)
        sql_flow_file = self.runner.getFlowFilesForRelationship("sql")[0]
        self.assertEqual(sql_flow_file.content, b"orders")
        self.assertEqual(sql_flow_file.getSize(), 6)
        self.assertIs(self.runner.getFlowFilesForRelationship("original")[0], original)

    def test_table_name_is_evaluated_against_flow_file_attributes(self):
        self.runner.setProperty("Table Name", "${env}_orders")
        self.runner.enqueue(b"", {"env": "prod"})
        self.runner.run()

        self.assertEqual(self.runner.getFlowFilesForRelationship("sql")[0].content, b"prod_orders")

    def test_each_flow_file_is_evaluated_separately(self):
        self.runner.setProperty("Table Name", "${schema}.${table}")
        self.runner.enqueue(b"", {"schema": "sales", "table": "orders"})
        self.runner.enqueue(b"", {"schema": "hr", "table": "employees"})
        self.runner.run(2)

        self.assertEqual([flow_file.content for flow_file in self.runner.getFlowFilesForRelationship("sql")],
                         [b"sales.orders", b"hr.employees"])
        self.runner.assertTransferCount("original", 2)

    def test_content_is_utf8_encoded(self):
        self.runner.setProperty("Table Name", "bücher")
        self.runner.enqueue(b"")
        self.runner.run()

        self.assertEqual(self.runner.getFlowFilesForRelationship("sql")[0].content, "bücher".encode("utf-8"))

    def test_sql_flow_file_has_mime_type_and_inherits_attributes(self):
        self.runner.setProperty("Table Name", "orders")
        original = self.runner.enqueue(b"{}", {"filename": "input.json", "env": "prod"})
        self.runner.run()

        sql_flow_file = self.runner.getFlowFilesForRelationship("sql")[0]
        self.assertEqual(sql_flow_file.getAttribute("mime.type"), "sql")
        self.assertEqual(sql_flow_file.getAttribute("filename"), "input.json")
        self.assertEqual(sql_flow_file.getAttribute("env"), "prod")
        self.assertNotEqual(sql_flow_file.getAttribute("uuid"), original.getAttribute("uuid"))

    def test_original_flow_file_is_untouched(self):
        self.runner.setProperty("Table Name", "${env}_orders")
        original = self.runner.enqueue(b'{"id": 1}', {"env": "prod"})
        attributes_before = original.getAttributes()
        self.runner.run()

        routed_original = self.runner.getFlowFilesForRelationship("original")[0]
        self.assertEqual(routed_original.content, b'{"id": 1}')
        self.assertEqual(routed_original.getAttributes(), attributes_before)
        self.assertNotIn("mime.type", routed_original.getAttributes())

    def test_no_incoming_flow_file_is_a_no_op(self):
        self.runner.setProperty("Table Name", "orders")
        self.runner.run()

        self.assertEqual(self.runner.routed, {})
        self.assertEqual(self.runner.created, [])

    def test_missing_table_name_routes_to_failure(self):
        original = self.runner.enqueue(b"{}")
        self.runner.run()

        self.runner.assertAllFlowFilesTransferred("failure", 1)
        self.assertIs(self.runner.getFlowFilesForRelationship("failure")[0], original)
        self.assertEqual(self.runner.created, [])

    def test_empty_table_name_routes_to_failure(self):
        self.runner.setProperty("Table Name", "")
        self.runner.enqueue(b"{}")
        self.runner.run()

        self.runner.assertAllFlowFilesTransferred("failure", 1)

    def test_table_name_evaluating_to_empty_routes_to_failure(self):
        self.runner.processor.logger = MagicMock()
        self.runner.setProperty("Table Name", "${missing}")
        self.runner.enqueue(b"{}", {"env": "prod"})
        self.runner.run()

        self.runner.assertAllFlowFilesTransferred("failure", 1)
        message = self.runner.processor.logger.error.call_args[0][0]
        self.assertIn("evaluated to an empty table name", message)
        self.assertNotIn("Traceback", message)

    def test_unresolvable_table_name_routes_to_failure(self):
        self.runner.processor.logger = MagicMock()
        self.runner.setProperty("Table Name", "${env")
        self.runner.enqueue(b"{}", {"env": "prod"})
        self.runner.run()

        self.runner.assertAllFlowFilesTransferred("failure", 1)
        self.runner.processor.logger.error.assert_called_once()
        message = self.runner.processor.logger.error.call_args[0][0]
        self.assertIn("Could not evaluate 'Table Name'", message)
        self.assertNotIn("Traceback", message)

    def test_attribute_value_containing_expression_syntax_is_used_literally(self):
        self.runner.setProperty("Table Name", "${env}_orders")
        self.runner.enqueue(b"{}", {"env": "${prod}"})
        self.runner.run()

        self.runner.assertTransferCount("failure", 0)
        self.assertEqual(self.runner.getFlowFilesForRelationship("sql")[0].content, b"${prod}_orders")

    def test_runner_logs_routed_flow_files(self):
        self.runner.setProperty("Table Name", "orders")
        self.runner.enqueue(b"{}")
        with self.assertLogs("mapperui.mock", level="DEBUG") as logs:
            self.runner.run()

        self.assertIn("Trigger of 'TableNameExtractor' routed 2 flow file(s)", logs.output[-1])

    def test_write_failure_routes_original_to_failure_and_drops_child(self):
        self.runner.setProperty("Table Name", "orders")
        original = self.runner.enqueue(b"{}")
        with patch.object(MockProcessSession, "write", side_effect=IOError("content repository is full")):
            self.runner.run()

        self.runner.assertAllFlowFilesTransferred("failure", 1)
        self.assertIs(self.runner.getFlowFilesForRelationship("failure")[0], original)
        self.assertEqual(len(self.runner.removed), 1)
        self.assertEqual(self.runner.removed, self.runner.created)

    def test_failure_is_logged(self):
        self.runner.processor.logger = MagicMock()
        self.runner.setProperty("Table Name", "")
        self.runner.enqueue(b"{}")
        self.runner.run()

        self.runner.processor.logger.error.assert_called_once()
        self.assertIn("'Table Name' property is not set", self.runner.processor.logger.error.call_args[0][0])

    def test_declarations_are_registered_with_the_host(self):
        host_processor = self.runner.host_processor
        self.assertEqual(host_processor.version, "0.0.1")
        self.assertIn("table name", host_processor.description)
        self.assertEqual(list(host_processor.properties), ["Table Name"])
        table_name = host_processor.properties["Table Name"]
        self.assertTrue(table_name["required"])
        self.assertTrue(table_name["expression language supported"])
        self.assertEqual(table_name["property type"], HostPropertyTypes.NON_BLANK_TYPE)
        self.assertEqual(set(host_processor.relationships), {"original", "sql", "failure"})
        self.assertFalse(host_processor.supports_dynamic_properties)

    def test_table_name_descriptor(self):
        self.assertEqual(TableNameExtractor.TABLE_NAME.name, "Table Name")
        self.assertEqual(TableNameExtractor.TABLE_NAME.expressionLanguageScope, ExpressionLanguageScope.FLOWFILE_ATTRIBUTES)

    def test_unknown_property_is_rejected(self):
        with self.assertRaises(KeyError):
            self.runner.setProperty("Schema Name", "public")


if __name__ == '__main__':
    unittest.main()
