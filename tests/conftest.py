import typing as t
from datetime import datetime, timezone

import pytest

from unilog.core import use_registry
from unilog.handlers import Handler
from unilog.levels import CanonicalLevel
from unilog.registry import LoggerRegistry
from unilog.types import LogRecord, LoggerConfiguration

FIXED_INSTANT = datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone.utc)

BARE = LoggerConfiguration(
    print_timestamp=False,
    print_level=False,
    print_thread=False,
    print_caller=False,
)


class RecordingHandler(Handler):
    """Keeps every published record and its formatted text in memory."""

    def __init__(self, config: t.Optional[LoggerConfiguration] = None, **kwargs: t.Any):
        super().__init__(config or BARE, **kwargs)
        self.records: list[LogRecord] = []
        self.texts: list[str] = []

    def emit(self, record: LogRecord, text: str) -> None:
        self.records.append(record)
        self.texts.append(text)

    @property
    def messages(self) -> list[str]:
        return [record.message for record in self.records]


@pytest.fixture
def bare_config() -> LoggerConfiguration:
    return BARE


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def make_record() -> t.Callable[..., LogRecord]:
    """Factory for records with a fixed instant and thread name."""

    def _make(
        message: str = "hello",
        level: t.Any = CanonicalLevel.INFO,
        *,
        thrown: t.Optional[BaseException] = None,
        thread_name: str = "worker-1",
        timestamp: datetime = FIXED_INSTANT,
    ) -> LogRecord:
        return LogRecord.create(
            level,
            message,
            logger_name="GLOBAL",
            thrown=thrown,
            timestamp=timestamp,
            thread_name=thread_name,
        )

    return _make


@pytest.fixture
def registry() -> t.Iterator[LoggerRegistry]:
    """
    Swaps in a fresh process-wide registry without the uncaught-error hook,
    so every test starts with an unconfigured global logger.
    """
    fresh = LoggerRegistry()
    previous = use_registry(fresh)
    yield fresh
    if "GLOBAL" in fresh:
        fresh.get_logger().close()
    use_registry(previous)
