from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Iterator, Tuple, Union

from domain.exceptions import EmptyDaySetError, InvalidWeekdayError


class Weekday(Enum):
    """Jours de la semaine, dans l'ordre canonique lundi -> dimanche"""
    MONDAY = 'Monday'
    TUESDAY = 'Tuesday'
    WEDNESDAY = 'Wednesday'
    THURSDAY = 'Thursday'
    FRIDAY = 'Friday'
    SATURDAY = 'Saturday'
    SUNDAY = 'Sunday'

    @property
    def index(self) -> int:
        """Décalage en jours depuis le lundi (0-6)"""
        return _ORDER.index(self)

    @classmethod
    def parse(cls, value: Union['Weekday', str]) -> 'Weekday':
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().capitalize()
            for day in cls:
                if day.value == normalized:
                    return day
        raise InvalidWeekdayError(value)


_ORDER = tuple(Weekday)


@dataclass(frozen=True)
class DaySet:
    """Value Object: ensemble non vide de jours de récurrence

    L'ordre n'a pas d'importance pour l'égalité ni pour les conflits;
    l'itération suit l'ordre canonique lundi -> dimanche.
    """
    days: FrozenSet[Weekday]

    def __post_init__(self):
        days = self.days
        if isinstance(days, (str, Weekday)):
            days = [days]
        try:
            normalized = frozenset(Weekday.parse(day) for day in days)
        except TypeError:
            raise InvalidWeekdayError(days)
        # Toujours un frozenset de Weekday, quelle que soit l'entrée
        object.__setattr__(self, 'days', normalized)
        if not self.days:
            raise EmptyDaySetError()

    @classmethod
    def of(cls, days: Iterable[Union[Weekday, str]]) -> 'DaySet':
        return cls(days)

    def intersects(self, other: 'DaySet') -> bool:
        return not self.days.isdisjoint(other.days)

    def intersection(self, other: 'DaySet') -> Tuple[Weekday, ...]:
        """Jours communs, dans l'ordre canonique"""
        return tuple(day for day in _ORDER if day in self.days and day in other.days)

    def to_ordered_sequence(self) -> Tuple[Weekday, ...]:
        return tuple(day for day in _ORDER if day in self.days)

    def names(self) -> list:
        return [day.value for day in self.to_ordered_sequence()]

    def __iter__(self) -> Iterator[Weekday]:
        return iter(self.to_ordered_sequence())

    def __len__(self) -> int:
        return len(self.days)

    def __contains__(self, day) -> bool:
        try:
            return Weekday.parse(day) in self.days
        except InvalidWeekdayError:
            return False

    def __str__(self) -> str:
        return ", ".join(self.names())
