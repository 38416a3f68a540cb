from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Mapping, Sequence

import pytest

import pylogfmt.api as pylogfmt_api
from pylogfmt.core import context
from pylogfmt.core.event import Level, LogEvent

EVENT_TIME = datetime(2017, 11, 30, 15, 10, 25, tzinfo=timezone.utc)
EVENT_MILLIS = int(EVENT_TIME.timestamp() * 1000)
HEADER = 'time="2017-11-30T15:10:25" level=info thread=thread0 package=app.billing module=Invoice '

EventFactory = Callable[..., LogEvent]


@pytest.fixture(autouse=True)
def reset_pylogfmt() -> Iterator[None]:
    yield
    pylogfmt_api.shutdown()
    context.clear()
    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    logging.captureWarnings(False)


@pytest.fixture
def make_event() -> EventFactory:
    def factory(
        message: str = "test message",
        *,
        level: Level = Level.INFO,
        mdc: Mapping[str, Any] | None = None,
        markers: Sequence[Any] | None = None,
        error: str | None = None,
        caller: str | None = "app.billing.Invoice",
    ) -> LogEvent:
        return LogEvent(
            timestamp=EVENT_MILLIS,
            level=level,
            message=message,
            thread_name="thread0",
            caller_data=(caller, "app.billing.tests") if caller else (),
            mdc=mdc,
            markers=markers,
            error=error,
        )

    return factory
