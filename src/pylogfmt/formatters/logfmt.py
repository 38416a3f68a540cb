"""logfmt layout and its stdlib ``logging.Formatter`` front end."""

from __future__ import annotations

import io
import logging
from typing import Iterable

from ..core.escaping import append_key_value
from ..core.event import LogEvent
from ..core.keys import NativeKey
from ..core.state import LayoutState

__all__ = ["LogFmtFormatter", "LogFmtLayout"]


class LogFmtLayout:
    """Compose one logfmt line per event.

    The line starts with the optional ``prefix`` and ``app`` tokens, followed
    by the output of every appender in the active field order, and ends with a
    newline.
    """

    def __init__(
        self,
        *,
        prefix: str | None = None,
        app_name: str | None = None,
        time_format: str | None = None,
        fields: str | Iterable[str] | None = None,
        mask_passwords: str | Iterable[str] | None = None,
        utc: bool = False,
    ) -> None:
        self.state = LayoutState()
        self.prefix = prefix
        self.app_name = app_name
        self.state.utc = utc
        if time_format is not None:
            self.state.set_time_format(time_format)
        if fields is not None:
            self.state.set_fields(fields)
        if mask_passwords is not None:
            self.state.set_mask_passwords(mask_passwords)

    # -- Configuration ------------------------------------------------------
    def set_prefix(self, prefix: str | None) -> None:
        self.prefix = prefix

    def set_app_name(self, app_name: str | None) -> None:
        self.app_name = app_name

    def set_time_format(self, time_format: str | None) -> bool:
        return self.state.set_time_format(time_format)

    def set_fields(self, fields: str | Iterable[str] | None) -> None:
        self.state.set_fields(fields)

    def set_mask_passwords(self, keys: str | Iterable[str] | None) -> None:
        self.state.set_mask_passwords(keys)

    # -- Layout -------------------------------------------------------------
    def do_layout(self, event: LogEvent) -> str:
        buffer = io.StringIO()
        state = self.state
        if self.prefix is not None:
            buffer.write(f"prefix={self.prefix} ")
        if self.app_name is not None:
            append_key_value(buffer, NativeKey.APP, self.app_name, state.mask_passwords)

        for appender in state.appenders():
            appender(buffer, event, state)

        line = buffer.getvalue()
        # A line without any token is emitted as an empty line.
        return line[:-1] + "\n" if line else "\n"


class LogFmtFormatter(logging.Formatter):
    """Render records into logfmt lines.

    The returned text has no trailing newline; handlers append their own
    terminator.
    """

    def __init__(
        self,
        *,
        prefix: str | None = None,
        app_name: str | None = None,
        time_format: str | None = None,
        fields: str | Iterable[str] | None = None,
        mask_passwords: str | Iterable[str] | None = None,
        utc: bool = False,
    ) -> None:
        super().__init__()
        self.layout = LogFmtLayout(
            prefix=prefix,
            app_name=app_name,
            time_format=time_format,
            fields=fields,
            mask_passwords=mask_passwords,
            utc=utc,
        )

    def to_event(self, record: logging.LogRecord) -> LogEvent:
        return LogEvent.from_record(record, self)

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return self.layout.do_layout(self.to_event(record))[:-1]
