from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional

from domain.exceptions import InvalidIntervalError, ValidationError
from domain.value_objects.day_set import DaySet, Weekday
from domain.value_objects.time_interval import TimeInterval


def _interval_from_payload(data: Dict[str, Any]) -> TimeInterval:
    """Lit un créneau depuis startTime/endTime (HH:MM) ou startMinutes/endMinutes"""
    if data.get('startMinutes') is not None and data.get('endMinutes') is not None:
        return TimeInterval(data['startMinutes'], data['endMinutes'])

    start_str = data.get('startTime') or data.get('start_time')
    end_str = data.get('endTime') or data.get('end_time')
    if not start_str or not end_str:
        raise InvalidIntervalError("Start and end time are required")
    return TimeInterval.from_strings(start_str, end_str)


def _required(data: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str):
            value = value.strip()
        if value:
            return value
    raise ValidationError(f"Missing required field: {keys[0]}", field=keys[0])


@dataclass(frozen=True)
class SessionDraft:
    """Séance proposée par l'appelant, pas encore persistée"""
    subject_id: str
    instructor_id: str
    room: str
    days: DaySet
    time_interval: TimeInterval

    def __post_init__(self):
        for name in ('subject_id', 'instructor_id', 'room'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"{name} cannot be empty", field=name)

    def fragment(self, day: Weekday) -> 'SessionDraft':
        """Fragment de la séance limité à un seul jour"""
        if day not in self.days:
            raise ValidationError(f"{day.value} is not part of this session", field='days')
        return replace(self, days=DaySet.of([day]))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionDraft':
        """Création depuis un payload (formulaire ou API)"""
        days = data.get('days') or []
        return cls(
            subject_id=_required(data, 'subjectId', 'subject_id'),
            instructor_id=_required(data, 'instructorId', 'instructor_id', 'teacherId'),
            room=_required(data, 'room'),
            days=DaySet.of(days),
            time_interval=_interval_from_payload(data)
        )


@dataclass(frozen=True)
class Session:
    """Entité principale: une réservation hebdomadaire récurrente"""
    session_id: Optional[str]
    subject_id: str
    instructor_id: str
    room: str
    days: DaySet
    time_interval: TimeInterval
    department_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_draft(cls, draft: SessionDraft, department_id: Optional[str],
                   created_at: Optional[datetime] = None) -> 'Session':
        return cls(
            session_id=None,
            subject_id=draft.subject_id,
            instructor_id=draft.instructor_id,
            room=draft.room,
            days=draft.days,
            time_interval=draft.time_interval,
            department_id=department_id,
            created_at=created_at or datetime.now()
        )

    def with_id(self, session_id: str) -> 'Session':
        return replace(self, session_id=str(session_id))

    def to_draft(self) -> SessionDraft:
        return SessionDraft(
            subject_id=self.subject_id,
            instructor_id=self.instructor_id,
            room=self.room,
            days=self.days,
            time_interval=self.time_interval
        )

    def merged_with(self, draft: SessionDraft) -> 'Session':
        """Applique les champs modifiables; département et date de création restent inchangés"""
        return replace(
            self,
            subject_id=draft.subject_id,
            instructor_id=draft.instructor_id,
            room=draft.room,
            days=draft.days,
            time_interval=draft.time_interval
        )

    def to_dict(self) -> dict:
        return {
            'id': self.session_id,
            'subjectId': self.subject_id,
            'instructorId': self.instructor_id,
            'room': self.room,
            'days': self.days.names(),
            'startMinutes': self.time_interval.start,
            'endMinutes': self.time_interval.end,
            'startTime': self.time_interval.start_time.strftime('%H:%M'),
            'endTime': self.time_interval.end_time.strftime('%H:%M'),
            'departmentId': self.department_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
