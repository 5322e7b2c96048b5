#!/usr/bin/env python3
import io
import unittest
from contextlib import redirect_stdout

from config import MESSAGE_TYPES
from message_service import MessageService, strip_superscripts


class TestMessageService(unittest.TestCase):
    def test_rolling_queue(self):
        service = MessageService(max_messages=2, echo=False)
        service.log_info("one")
        service.log_warning("two")
        service.log_error("three")
        self.assertEqual([(t, m) for _, t, m in service.get_messages()],
                         [("warning", "two"), ("error", "three")])
        service.clear()
        self.assertEqual(service.get_messages(), [])

    def test_formatted_messages(self):
        service = MessageService(echo=False)
        service.log_info("loaded")
        service.log_error("broken")
        formatted, colors = service.get_formatted_messages()
        self.assertTrue(formatted[0].endswith("] loaded"))
        self.assertTrue(formatted[1].endswith("] ERROR: broken"))
        self.assertEqual(colors, [MESSAGE_TYPES["info"]["color"], MESSAGE_TYPES["error"]["color"]])

    def test_echo_and_debug(self):
        out = io.StringIO()
        service = MessageService()
        with redirect_stdout(out):
            service.log_warning("careful")
            service.log_debug("details")
        self.assertIn("WARNING: careful", out.getvalue())
        self.assertIn("DEBUG: details", out.getvalue())
        # Debug messages are not queued
        self.assertEqual(len(service.get_messages()), 1)

    def test_strip_superscripts(self):
        self.assertEqual(strip_superscripts("¹³C"), "13C")
        service = MessageService(echo=False)
        service.log_info("¹H shift")
        self.assertEqual(service.get_messages()[0][2], "1H shift")


if __name__ == "__main__":
    unittest.main()
