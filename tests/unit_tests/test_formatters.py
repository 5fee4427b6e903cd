"""
Record formatting tests: prefix fields, line layout, exception traces.
"""

from __future__ import annotations

import inspect
from datetime import datetime, timedelta, timezone

import orjson
import pytest

from unilog import formatters as formatters_module
from unilog.formatters import JsonFormatter, RecordFormatter
from unilog.levels import CanonicalLevel
from unilog.types import LoggerConfiguration


def only(**enabled: bool) -> LoggerConfiguration:
    fields = {"print_timestamp": False, "print_level": False, "print_thread": False, "print_caller": False}
    fields.update(enabled)
    return LoggerConfiguration(**fields)


class TestPrefixFields:
    """Optional prefix fields"""

    def test_no_fields_renders_bare_message(self, make_record) -> None:
        """With every field off only the message is written"""
        out = RecordFormatter(only()).format(make_record("hello"))
        assert out == "hello\n"

    @pytest.mark.parametrize(
        ("level", "rendered"),
        [
            (CanonicalLevel.TRACE, " [TRACE]"),
            (CanonicalLevel.DEBUG, " [DEBUG]"),
            (CanonicalLevel.INFO, " [INFO ]"),
            (CanonicalLevel.WARN, " [WARN ]"),
            (CanonicalLevel.ERROR, " [ERROR]"),
        ],
    )
    def test_level_is_padded_to_five(self, make_record, level, rendered) -> None:
        """Level names are padded to five characters"""
        out = RecordFormatter(only(print_level=True)).format(make_record("msg", level))
        assert out == f"{rendered} msg\n"

    def test_timestamp_is_utc_with_milliseconds(self, make_record) -> None:
        """Timestamps render in UTC with milliseconds"""
        out = RecordFormatter(only(print_timestamp=True)).format(make_record("hello"))
        assert out == "[05-03-2024 14:07:09.123] hello\n"

    def test_timestamp_converts_other_zones_to_utc(self, make_record) -> None:
        """Aware timestamps in other zones are converted to UTC"""
        local = datetime(2024, 3, 5, 16, 7, 9, 5000, tzinfo=timezone(timedelta(hours=2)))
        out = RecordFormatter(only(print_timestamp=True)).format(make_record("hello", timestamp=local))
        assert out == "[05-03-2024 14:07:09.005] hello\n"

    def test_thread_name_comes_from_the_record(self, make_record) -> None:
        """The thread field uses the record's thread name"""
        out = RecordFormatter(only(print_thread=True)).format(make_record("hello", thread_name="pool-3"))
        assert out == " [pool-3] hello\n"

    def test_caller_names_the_formatting_call_site(self, make_record) -> None:
        """The caller field names the code calling format"""
        formatter = RecordFormatter(only(print_caller=True))
        record = make_record("hello")
        line = inspect.currentframe().f_lineno + 1
        out = formatter.format(record)
        expected = f" [{__name__}.TestPrefixFields.test_caller_names_the_formatting_call_site(function) : {line}]"
        assert out == f"{expected} hello\n"

    def test_field_order_is_fixed(self, make_record) -> None:
        """Timestamp precedes the caller"""
        out = RecordFormatter(only(print_timestamp=True, print_caller=True)).format(make_record("hello"))
        assert out.startswith("[05-03-2024 14:07:09.123] [")
        assert out.index("[05-03-2024") < out.index(f"[{__name__}.")

    def test_all_fields(self, make_record) -> None:
        """Default configuration renders every field"""
        out = RecordFormatter().format(make_record("hello", CanonicalLevel.WARN))
        assert out.startswith("[05-03-2024 14:07:09.123] [WARN ] [worker-1] [")
        assert out.endswith("] hello\n")

    def test_explicit_config_overrides_snapshot(self, make_record) -> None:
        """A per-call configuration replaces the snapshot"""
        formatter = RecordFormatter(only())
        out = formatter.format(make_record("hello"), only(print_level=True))
        assert out == " [INFO ] hello\n"


class TestLineLayout:
    """Multi-line layout"""

    def test_multiline_message_without_prefix(self, make_record) -> None:
        """Each line of a bare message ends with a newline"""
        out = RecordFormatter(only()).format(make_record("first\nsecond"))
        assert out == "first\nsecond\n"
        assert out.splitlines() == ["first", "second"]

    def test_every_line_gets_the_prefix(self, make_record) -> None:
        """Each line is prefixed, for both CRLF and LF breaks"""
        out = RecordFormatter(only(print_level=True)).format(make_record("first\r\nsecond\nthird"))
        assert out.splitlines() == [" [INFO ] first", " [INFO ] second", " [INFO ] third"]

    @pytest.mark.parametrize("separator", ["\r", "\f", "\v", "\x1c", "\x85", "\u2028", "\u2029"])
    def test_other_line_breaks_stay_on_one_line(self, make_record, separator) -> None:
        """Only CRLF and LF split lines"""
        out = RecordFormatter(only(print_level=True)).format(make_record(f"left{separator}right"))
        assert out == f" [INFO ] left{separator}right\n"

    def test_trailing_newlines_do_not_add_lines(self, make_record) -> None:
        """Trailing empty lines are dropped"""
        out = RecordFormatter(only()).format(make_record("done\n\n"))
        assert out == "done\n"

    def test_empty_message_still_renders_one_line(self, make_record) -> None:
        """An empty message renders a single prefixed line"""
        out = RecordFormatter(only(print_level=True)).format(make_record(""))
        assert out == " [INFO ] \n"


class TestExceptions:
    """Exception trace rendering"""

    @staticmethod
    def _caught() -> ValueError:
        try:
            raise ValueError("boom")
        except ValueError as exc:
            return exc

    def test_trace_lines_are_prefixed(self, make_record) -> None:
        """Every trace line carries the prefix"""
        record = make_record("failed", CanonicalLevel.ERROR, thrown=self._caught())
        lines = RecordFormatter(only(print_level=True)).format(record).splitlines()

        assert lines[0] == " [ERROR] failed"
        assert lines[1] == " [ERROR] Traceback (most recent call last):"
        assert lines[-1] == " [ERROR] ValueError: boom"
        assert all(line.startswith(" [ERROR] ") for line in lines)

    def test_trace_failure_substitutes_empty_and_reports(
        self, make_record, registry, recorder, monkeypatch
    ) -> None:
        """A failing trace render is reported and replaced with nothing"""
        registry.get_logger().add_handler(recorder)

        def broken(exc):
            raise OSError("cannot render")

        monkeypatch.setattr(formatters_module.traceback, "format_exception", broken)

        record = make_record("failed", CanonicalLevel.ERROR, thrown=self._caught())
        out = RecordFormatter(only()).format(record)

        assert out == "failed\n"
        assert recorder.messages == ["Failed to log exception"]
        assert isinstance(recorder.records[0].thrown, OSError)


class TestJsonFormatter:
    """JSON layout"""

    def test_selected_fields(self, make_record) -> None:
        """Toggles select the optional keys"""
        out = JsonFormatter(only(print_timestamp=True, print_level=True)).format(
            make_record("disk low", CanonicalLevel.WARN)
        )
        assert out.endswith("\n")
        payload = orjson.loads(out)
        assert payload == {
            "message": "disk low",
            "logger": "GLOBAL",
            "timestamp": "2024-03-05T14:07:09.123456Z",
            "level": "WARN",
        }

    def test_exception_is_included(self, make_record) -> None:
        """The exception trace is included when present"""
        record = make_record("failed", CanonicalLevel.ERROR, thrown=TestExceptions._caught())
        payload = orjson.loads(JsonFormatter(only()).format(record))
        assert payload["exception"].rstrip().endswith("ValueError: boom")
