"""
Countdown duration calculation.

compute() resolves a target timestamp against the current time once, producing
either EXPIRED or a Remaining value. Remaining never mutates: the fields shown
on frame k are derived from the base delta and the k seconds elapsed since.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from email.utils import parsedate_to_datetime

logger = logging.getLogger(__name__)

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR


@dataclass(frozen=True)
class DurationFields:
    days: int
    hours: int
    minutes: int
    seconds: int

    @classmethod
    def from_milliseconds(cls, ms: int) -> "DurationFields":
        days = ms // MS_PER_DAY
        hours = ms // MS_PER_HOUR - days * 24
        minutes = ms // MS_PER_MINUTE - days * 24 * 60 - hours * 60
        seconds = (
            ms // MS_PER_SECOND
            - days * 24 * 60 * 60
            - hours * 60 * 60
            - minutes * 60
        )
        if days < 0:
            return ZERO_FIELDS
        return cls(days, hours, minutes, seconds)

    @property
    def total_seconds(self) -> int:
        return self.days * 86400 + self.hours * 3600 + self.minutes * 60 + self.seconds

    def as_strings(self) -> tuple[str, str, str, str]:
        """Two-digit zero-padded days, hours, minutes, seconds."""
        return (
            f"{self.days:02d}",
            f"{self.hours:02d}",
            f"{self.minutes:02d}",
            f"{self.seconds:02d}",
        )


ZERO_FIELDS = DurationFields(0, 0, 0, 0)


class Expired:
    """The target instant is not in the future."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def fields(self, elapsed_seconds: int = 0) -> DurationFields:
        return ZERO_FIELDS

    def __repr__(self) -> str:
        return "EXPIRED"


EXPIRED = Expired()


@dataclass(frozen=True)
class Remaining:
    milliseconds: int

    def fields(self, elapsed_seconds: int = 0) -> DurationFields:
        return DurationFields.from_milliseconds(
            self.milliseconds - elapsed_seconds * MS_PER_SECOND
        )


DurationState = Expired | Remaining


def _parse_iso(text: str) -> datetime | None:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except (TypeError, ValueError):
        return None


def _parse_rfc2822(text: str) -> datetime | None:
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def parse_time(value: str) -> datetime | None:
    """
    Parse an ISO-8601 or RFC 2822 timestamp into an aware datetime.

    Naive values are taken as local time. Returns None when the value cannot
    be parsed or lies too close to the datetime limits to be localised.
    """
    text = value.strip()
    parsed = _parse_iso(text) or _parse_rfc2822(text)
    if parsed is None:
        return None
    try:
        return parsed.astimezone()
    except (OverflowError, OSError, ValueError):
        return None


def compute(target_time: str, now: datetime | None = None) -> DurationState:
    """
    Resolve the countdown from now until target_time.

    Unparseable input is treated as a date that has already passed.
    """
    target = parse_time(target_time) if isinstance(target_time, str) else None
    if target is None:
        logger.debug(f"Could not parse target time {target_time!r}, treating as expired")
        return EXPIRED

    try:
        current = (now or datetime.now()).astimezone()
        difference = target - current
    except (OverflowError, OSError, ValueError):
        logger.debug(f"Target time {target_time!r} is out of range, treating as expired")
        return EXPIRED
    delta_ms = (
        difference.days * MS_PER_DAY
        + difference.seconds * MS_PER_SECOND
        + difference.microseconds // 1000
    )

    if delta_ms <= 0:
        return EXPIRED
    return Remaining(delta_ms)
