from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, List, Optional

from domain.entities.session import Session
from domain.exceptions import ValidationError
from domain.value_objects.day_set import Weekday


def week_start_for(day: date) -> date:
    """Lundi de la semaine contenant la date donnée"""
    return day - timedelta(days=day.weekday())


@dataclass(frozen=True)
class Occurrence:
    """Instance concrète d'une séance à une date donnée

    Plusieurs occurrences partagent le même session_id: elles représentent
    la même réservation récurrente sur des jours différents.
    """
    session_id: str
    day: Weekday
    date: date
    start: datetime
    end: datetime
    title: str
    subject_id: str
    instructor_id: str
    room: str
    department_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'id': self.session_id,
            'day': self.day.value,
            'date': self.date.isoformat(),
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'title': self.title,
            'subjectId': self.subject_id,
            'instructorId': self.instructor_id,
            'room': self.room,
            'departmentId': self.department_id
        }


class OccurrenceMaterializer:
    """Transforme une règle de récurrence hebdomadaire en événements de calendrier"""

    def __init__(self, subject_name: Optional[Callable[[str], Optional[str]]] = None):
        self._subject_name = subject_name

    def materialize(self, session: Session, week_start: date) -> List[Occurrence]:
        week_start = self._check_week_start(week_start)

        title = self._title_for(session)
        occurrences = []
        for day in session.days.to_ordered_sequence():
            day_date = week_start + timedelta(days=day.index)
            midnight = datetime.combine(day_date, time.min)
            occurrences.append(Occurrence(
                session_id=session.session_id,
                day=day,
                date=day_date,
                start=midnight + timedelta(minutes=session.time_interval.start),
                end=midnight + timedelta(minutes=session.time_interval.end),
                title=title,
                subject_id=session.subject_id,
                instructor_id=session.instructor_id,
                room=session.room,
                department_id=session.department_id
            ))
        return occurrences

    def materialize_all(self, sessions: Iterable[Session], week_start: date) -> List[Occurrence]:
        week_start = self._check_week_start(week_start)
        occurrences = []
        for session in sessions:
            occurrences.extend(self.materialize(session, week_start))
        occurrences.sort(key=lambda o: (o.start, o.room))
        return occurrences

    @staticmethod
    def _check_week_start(week_start: date) -> date:
        if isinstance(week_start, datetime):
            week_start = week_start.date()
        if week_start.weekday() != 0:
            raise ValidationError(
                f"Reference week must start on a Monday, got {week_start.isoformat()}", field="week_start"
            )
        return week_start

    def _title_for(self, session: Session) -> str:
        subject = None
        if self._subject_name:
            subject = self._subject_name(session.subject_id)
        return f"{subject or session.subject_id} | Room: {session.room}"
