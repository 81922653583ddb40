from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple, Union

from domain.entities.session import Session, SessionDraft
from domain.value_objects.day_set import Weekday

INSTRUCTOR = 'instructor'
ROOM = 'room'

Candidate = Union[Session, SessionDraft]


@dataclass(frozen=True)
class Conflict:
    """Collision entre une séance candidate et une séance existante"""
    session_id: str
    resources: FrozenSet[str]
    days: Tuple[Weekday, ...]

    @property
    def instructor_conflict(self) -> bool:
        return INSTRUCTOR in self.resources

    @property
    def room_conflict(self) -> bool:
        return ROOM in self.resources

    def describe(self) -> str:
        kinds = " and ".join(r for r in (INSTRUCTOR, ROOM) if r in self.resources)
        days = ", ".join(day.value for day in self.days)
        return f"{kinds} already booked by session {self.session_id} on {days}"

    def to_dict(self) -> dict:
        return {
            'session_id': self.session_id,
            'resources': sorted(self.resources),
            'days': [day.value for day in self.days],
            'message': self.describe()
        }


class ConflictDetector:
    """Service du domaine pour la détection des doubles réservations

    Une séance candidate est en conflit avec une séance existante lorsqu'elles
    partagent au moins un jour, que leurs créneaux se chevauchent, et qu'elles
    utilisent le même enseignant OU la même salle. Les deux ressources sont
    évaluées indépendamment.

    Aucun état n'est conservé entre deux appels: l'appelant relance la
    détection après chaque modification de l'ensemble des séances.
    """

    def find_conflicts(self, candidate: Candidate, existing_sessions: Iterable[Session],
                       exclude_id: Optional[str] = None) -> Iterator[Conflict]:
        """Produit paresseusement un Conflict par séance existante en collision"""
        for session in existing_sessions:
            if exclude_id is not None and session.session_id == exclude_id:
                continue
            if not session.days.intersects(candidate.days):
                continue
            if not session.time_interval.overlaps(candidate.time_interval):
                continue

            resources = set()
            if session.instructor_id == candidate.instructor_id:
                resources.add(INSTRUCTOR)
            if session.room == candidate.room:
                resources.add(ROOM)

            if resources:
                yield Conflict(
                    session_id=session.session_id,
                    resources=frozenset(resources),
                    days=session.days.intersection(candidate.days)
                )

    def has_conflict(self, candidate: Candidate, existing_sessions: Iterable[Session],
                     exclude_id: Optional[str] = None) -> bool:
        return next(iter(self.find_conflicts(candidate, existing_sessions, exclude_id)), None) is not None

    def conflicts_by_day(self, candidate: SessionDraft, existing_sessions: Iterable[Session],
                         exclude_id: Optional[str] = None) -> Dict[Weekday, List[Conflict]]:
        """Rapport jour par jour: chaque jour demandé, avec ses conflits (liste vide = libre)"""
        existing = list(existing_sessions)
        report = OrderedDict()
        for day in candidate.days:
            fragment = candidate.fragment(day)
            report[day] = list(self.find_conflicts(fragment, existing, exclude_id))
        return report
