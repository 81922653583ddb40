import re
from dataclasses import dataclass
from datetime import time

from domain.exceptions import InvalidIntervalError

MINUTES_PER_DAY = 24 * 60
LAST_MINUTE = MINUTES_PER_DAY - 1


TIME_PATTERN = re.compile(r'(\d{1,2}):(\d{2})')


def minutes_from_string(value: str) -> int:
    """Convertit une heure au format HH:MM en minutes depuis minuit

    Secondes et décalages horaires sont refusés.
    """
    match = TIME_PATTERN.fullmatch(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidIntervalError(f"Invalid time format: {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidIntervalError(f"Invalid time format: {value!r}")
    return hours * 60 + minutes


def minutes_to_string(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class TimeInterval:
    """Value Object représentant un créneau horaire semi-ouvert [start, end)

    Les bornes sont exprimées en minutes depuis minuit, heure locale.
    """
    start: int
    end: int

    def __post_init__(self):
        for bound in (self.start, self.end):
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise InvalidIntervalError(f"Interval bounds must be integers, got {bound!r}")
            if not (0 <= bound <= LAST_MINUTE):
                raise InvalidIntervalError(
                    f"Interval bound {bound} outside of [0, {LAST_MINUTE}]"
                )
        if self.start >= self.end:
            raise InvalidIntervalError("Start time must be before end time")

    @classmethod
    def from_strings(cls, start_str: str, end_str: str) -> 'TimeInterval':
        """Crée un TimeInterval à partir de chaînes HH:MM"""
        return cls(minutes_from_string(start_str), minutes_from_string(end_str))

    @property
    def start_time(self) -> time:
        return time(self.start // 60, self.start % 60)

    @property
    def end_time(self) -> time:
        return time(self.end // 60, self.end % 60)

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    def overlaps(self, other: 'TimeInterval') -> bool:
        """Chevauchement strict: deux créneaux qui se touchent ne se chevauchent pas"""
        return self.start < other.end and self.end > other.start

    def to_display_format(self) -> str:
        return f"{minutes_to_string(self.start)}-{minutes_to_string(self.end)}"
