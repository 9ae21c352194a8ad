"""Unit tests for structured JSON logging."""

import json
import logging
import unittest

from utils.logging import JSONFormatter, setup_structured_logging


def _record(msg='hello', **extra) -> logging.LogRecord:
    record = logging.LogRecord('api.test', logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter(unittest.TestCase):

    def setUp(self):
        self.formatter = JSONFormatter()

    def test_standard_fields(self):
        data = json.loads(self.formatter.format(_record()))

        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'api.test')
        self.assertEqual(data['message'], 'hello')
        self.assertTrue(data['timestamp'].endswith('Z'))

    def test_extra_fields_included(self):
        data = json.loads(self.formatter.format(_record(userId='user-1', status=200)))

        self.assertEqual(data['userId'], 'user-1')
        self.assertEqual(data['status'], 200)
        self.assertNotIn('args', data)

    def test_credentials_redacted(self):
        data = json.loads(self.formatter.format(_record(password='Secret1!', authToken='jwt')))

        self.assertEqual(data['password'], '[REDACTED]')
        self.assertEqual(data['authToken'], '[REDACTED]')

    def test_non_serializable_values_stringified(self):
        data = json.loads(self.formatter.format(_record(when=object())))
        self.assertIsInstance(data['when'], str)


class TestSetupStructuredLogging(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self._saved = (root.level, list(root.handlers))

    def tearDown(self):
        root = logging.getLogger()
        root.setLevel(self._saved[0])
        root.handlers = self._saved[1]

    def test_installs_json_handler(self):
        setup_structured_logging('debug')

        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JSONFormatter)
        self.assertEqual(logging.getLogger('uvicorn.access').level, logging.WARNING)


if __name__ == '__main__':
    unittest.main()
