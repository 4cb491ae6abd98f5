import io
import logging
import unittest

from posthub.core.error_handler import ErrorResponder
from posthub.core.errors import NotFoundError
from posthub.core.logging import (
    ContextFilter,
    build_handler,
    log_context,
    set_log_context,
    trace_id_var,
    user_id_var,
)


def _record(**extra):
    record = logging.LogRecord("posthub.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestContextFilter(unittest.TestCase):
    def test_fills_defaults(self):
        record = _record()
        with log_context(trace_id="t-ctx", user_id="7"):
            self.assertTrue(ContextFilter().filter(record))
        self.assertEqual((record.trace_id, record.user_id, record.error_kind), ("t-ctx", "7", "-"))

    def test_extra_values_win(self):
        record = _record(trace_id="explicit", error_kind="NotFoundError")
        with log_context(trace_id="ambient"):
            ContextFilter().filter(record)
        self.assertEqual(record.trace_id, "explicit")
        self.assertEqual(record.error_kind, "NotFoundError")


class TestLogContext(unittest.TestCase):
    def test_restores_previous_values(self):
        before = (trace_id_var.get(), user_id_var.get())
        with log_context(trace_id="inner", user_id="42"):
            set_log_context(user_id="43")
            self.assertEqual(user_id_var.get(), "43")
        self.assertEqual((trace_id_var.get(), user_id_var.get()), before)


class TestHandlerOutput(unittest.TestCase):
    def setUp(self):
        self.stream = io.StringIO()
        self.logger = logging.getLogger("posthub.errors")
        self.handler = build_handler(self.stream)
        self.logger.addHandler(self.handler)
        self.addCleanup(self.logger.removeHandler, self.handler)

    def test_plain_record_renders(self):
        logging.getLogger("posthub.errors.plain").warning("no context here")
        line = self.stream.getvalue()
        self.assertIn("kind=-", line)
        self.assertIn("no context here", line)

    def test_responder_line_carries_kind_once(self):
        ErrorResponder(is_development=False).respond(NotFoundError("Post not found!"), "t-log")
        line = self.stream.getvalue()
        self.assertIn("trace=t-log", line)
        self.assertIn("kind=NotFoundError", line)
        self.assertEqual(line.count("t-log"), 1)
        self.assertIn("Post not found!", line)


if __name__ == "__main__":
    unittest.main()
