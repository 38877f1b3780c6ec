"""Operation counters with an ordered message log.

A :class:`StatisticsCounter` is attached to collections and context holders
and records what they did.  Every counting operation bumps
``total_processed`` exactly once, in addition to its own counter, so the
total always equals the number of counting calls made.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from pyctxstore._render import is_string_sequence, render_message
from pyctxstore._time import format_duration_ms

if TYPE_CHECKING:
    from pyctxstore.config import StoreConfig


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _number(value: int) -> str:
    return f"{value:,}"


class StatisticsCounter(BaseModel):
    """Mutable activity counters for one owning collection or store.

    Messages are normalised to text when they are appended.  Strings are
    stored verbatim, sequences of strings are expanded into one entry per
    element and any other object is stored as pretty-printed JSON.

    Not safe for uncoordinated concurrent mutation; give each counter a
    single owner.
    """

    model_config = ConfigDict(extra="forbid")

    total_processed: int = 0
    successes: int = 0
    failures: int = 0
    skipped: int = 0

    add: int = 0
    delete: int = 0
    update: int = 0
    upsert: int = 0

    messages: list[str] = Field(default_factory=list)

    start_time: datetime = Field(default_factory=_utcnow)
    finish_time: datetime | None = None

    # ------------------------------------------------------------------
    # Message log
    # ------------------------------------------------------------------

    def add_message(self, message: Any = None) -> int:
        """Append *message* to the log without counting; returns the log length."""
        if is_string_sequence(message) and message:
            self.messages.extend(message)
        else:
            self.messages.append(render_message(message))
        return len(self.messages)

    def _count(self, counter: str, message: Any) -> int:
        setattr(self, counter, getattr(self, counter) + 1)
        self.total_processed += 1
        if message is not None:
            self.add_message(message)
        return int(getattr(self, counter))

    # ------------------------------------------------------------------
    # Counting operations
    # ------------------------------------------------------------------

    def add_processed(self, message: Any = None) -> int:
        """Count one processed item and always log *message*.

        An absent message still produces an (empty) log entry.
        """
        self.total_processed += 1
        self.add_message(message)
        return self.total_processed

    def add_success(self, message: Any = None) -> int:
        return self._count("successes", message)

    def add_failure(self, message: Any = None) -> int:
        return self._count("failures", message)

    def add_skip(self, message: Any = None) -> int:
        return self._count("skipped", message)

    def added(self, message: Any = None) -> int:
        return self._count("add", message)

    def deleted(self, message: Any = None) -> int:
        return self._count("delete", message)

    def updated(self, message: Any = None) -> int:
        return self._count("update", message)

    def upserted(self, message: Any = None) -> int:
        return self._count("upsert", message)

    def add_stats(self, other: StatisticsCounter | None) -> None:
        """Accumulate the counts and messages of *other* into this counter."""
        if other is None:
            return
        for name in ("total_processed", "successes", "failures", "skipped", "add", "delete", "update", "upsert"):
            setattr(self, name, getattr(self, name) + getattr(other, name))
        self.messages.extend(other.messages)

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------

    def finished(self) -> None:
        self.finish_time = _utcnow()

    @property
    def processing_time_ms(self) -> int:
        """Elapsed milliseconds between ``start_time`` and finish (or now)."""
        end = self.finish_time or _utcnow()
        return abs(int((end - self.start_time).total_seconds() * 1000))

    @property
    def processing_time_seconds(self) -> float:
        return self.processing_time_ms / 1000.0

    def processing_time_string(self, long_format: bool = False) -> str:
        return format_duration_ms(self.processing_time_ms, long_format=long_format)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def message_string(self, one_line: bool = False) -> str:
        """Render the counters and the message log as a report.

        The report starts with ``Processed {total_processed} items``.  The
        elapsed time is only included after :meth:`finished` has been
        called, so repeated calls without mutation return the same text.
        """
        end = "" if one_line else "."
        sep = ", " if one_line else "\n"

        s = f"Processed {_number(self.total_processed)} items"
        if self.finish_time is not None:
            s += f" in {self.processing_time_string(True)}"
        s += end

        for label, count in (
            ("Added", self.add),
            ("Updated", self.update),
            ("Upserted", self.upsert),
            ("Deleted", self.delete),
            ("Skipped", self.skipped),
            ("Successes", self.successes),
            ("Failures", self.failures),
        ):
            if count:
                s += f"{sep}{label}: {_number(count)}{end}"

        if one_line:
            s += "."
        elif self.messages:
            s += "\n\nMessages:"
            for message in self.messages:
                s += f"\n{message}"

        return s

    def report(self, config: StoreConfig | None = None) -> str:
        """Render using the configured default mode."""
        one_line = config.one_line_reports if config is not None else False
        return self.message_string(one_line=one_line)

    def __str__(self) -> str:
        return self.message_string()
