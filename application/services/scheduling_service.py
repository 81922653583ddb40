from datetime import date, datetime
from threading import RLock
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pytz

from domain.entities.session import Session, SessionDraft
from domain.exceptions import ConflictError, NotFoundError, ValidationError
from domain.repositories.session_repository import SessionRepository, SubjectDirectory
from domain.services.conflict_detector import Conflict, ConflictDetector
from domain.services.occurrence_materializer import Occurrence, OccurrenceMaterializer, week_start_for
from domain.value_objects.day_set import DaySet, Weekday
from domain.value_objects.time_interval import TimeInterval, minutes_from_string
from infrastructure.container import container
from utils.logger import log_business_event, log_schedule_conflict

DEFAULT_TIMEZONE = "Europe/Paris"

CandidateInput = Union[SessionDraft, Mapping[str, Any]]


class SchedulingService:
    """Service applicatif: création, modification et suppression des séances

    Chaque écriture suit la séquence explicite lecture de l'ensemble des
    séances -> détection des conflits -> écriture unique. La séquence est
    sérialisée par un verrou au sein du processus seulement: deux processus
    validant le même instantané peuvent encore produire une double réservation.
    """

    def __init__(self, repository: Optional[SessionRepository] = None,
                 subjects: Optional[SubjectDirectory] = None,
                 detector: Optional[ConflictDetector] = None,
                 timezone_name: str = DEFAULT_TIMEZONE):
        self._repository = repository if repository is not None else container.get(SessionRepository)
        self._subjects = subjects if subjects is not None else container.get(SubjectDirectory)
        if detector is None:
            detector = container.get(ConflictDetector) if container.is_registered(ConflictDetector) else ConflictDetector()
        self._detector = detector
        self._materializer = OccurrenceMaterializer(self._subjects.subject_name)
        self._timezone = pytz.timezone(timezone_name)
        self._write_lock = RLock()

    def create(self, candidate: CandidateInput) -> Session:
        """Valide puis persiste une nouvelle séance"""
        draft = self._as_draft(candidate)

        department_id = self._subjects.department_for(draft.subject_id)
        if department_id is None:
            raise NotFoundError('Subject', draft.subject_id)

        with self._write_lock:
            snapshot = self._repository.list_sessions()
            self._ensure_conflict_free(draft, snapshot)
            session = self._repository.insert_session(Session.from_draft(draft, department_id))

        log_business_event(
            'create', 'session', session.session_id,
            instructor_id=session.instructor_id, room=session.room, days=session.days.names()
        )
        return session

    def update(self, session_id: str, changes: CandidateInput) -> Session:
        """Fusionne les modifications et revalide contre toutes les autres séances"""
        with self._write_lock:
            current = self._repository.find_by_id(session_id)
            if current is None:
                raise NotFoundError('Session', session_id)

            draft = self._merge(current, changes)
            snapshot = self._repository.list_sessions()
            self._ensure_conflict_free(draft, snapshot, exclude_id=current.session_id)

            updated = current.merged_with(draft)
            self._repository.update_session(current.session_id, updated)

        log_business_event(
            'update', 'session', updated.session_id,
            instructor_id=updated.instructor_id, room=updated.room, days=updated.days.names()
        )
        return updated

    def delete(self, session_id: str) -> None:
        """Suppression sans revérification: libérer une ressource ne crée pas de conflit"""
        with self._write_lock:
            if not self._repository.delete_session(session_id):
                raise NotFoundError('Session', session_id)
        log_business_event('delete', 'session', session_id)

    def bulk_delete(self, session_ids: Iterable[str]) -> Dict[str, bool]:
        """Supprime plusieurs séances; le résultat indique l'issue pour chaque ID"""
        results = {}
        with self._write_lock:
            # IDs répétés: seule la première issue compte
            for session_id in dict.fromkeys(str(sid) for sid in session_ids):
                results[session_id] = self._repository.delete_session(session_id)

        deleted = [sid for sid, ok in results.items() if ok]
        log_business_event('bulk_delete', 'session', ",".join(deleted), requested=len(results))
        return results

    def get(self, session_id: str) -> Session:
        session = self._repository.find_by_id(session_id)
        if session is None:
            raise NotFoundError('Session', session_id)
        return session

    def list_sessions(self, department_id: Optional[str] = None,
                      instructor_id: Optional[str] = None) -> List[Session]:
        """Séances filtrées par département et/ou enseignant"""
        return [
            s for s in self._repository.list_sessions()
            if (not department_id or s.department_id == department_id)
            and (not instructor_id or s.instructor_id == instructor_id)
        ]

    def check_availability(self, candidate: CandidateInput,
                           exclude_id: Optional[str] = None) -> Dict[Weekday, List[Conflict]]:
        """Rapport jour par jour pour une séance proposée, sans rien persister"""
        draft = self._as_draft(candidate)
        return self._detector.conflicts_by_day(draft, self._repository.list_sessions(), exclude_id)

    def list_occurrences(self, week_start: Optional[date] = None,
                         department_id: Optional[str] = None,
                         instructor_id: Optional[str] = None) -> List[Occurrence]:
        """Occurrences de calendrier de toutes les séances pour la semaine donnée"""
        if week_start is None:
            week_start = self.current_week_start()
        sessions = self.list_sessions(department_id=department_id, instructor_id=instructor_id)
        return self._materializer.materialize_all(sessions, week_start)

    def current_week_start(self) -> date:
        """Lundi de la semaine courante, selon le calendrier local configuré"""
        today = datetime.now(self._timezone).date()
        return week_start_for(today)

    def _ensure_conflict_free(self, draft: SessionDraft, snapshot: List[Session],
                              exclude_id: Optional[str] = None) -> None:
        conflicts = list(self._detector.find_conflicts(draft, snapshot, exclude_id))
        if conflicts:
            log_schedule_conflict(draft.instructor_id, draft.room, conflicts)
            raise ConflictError(
                conflicts,
                self._detector.conflicts_by_day(draft, snapshot, exclude_id)
            )

    @staticmethod
    def _as_draft(candidate: CandidateInput) -> SessionDraft:
        if isinstance(candidate, SessionDraft):
            return candidate
        return SessionDraft.from_dict(dict(candidate))

    @staticmethod
    def _merge(current: Session, changes: CandidateInput) -> SessionDraft:
        """Applique un changement partiel sur la séance courante"""
        if isinstance(changes, SessionDraft):
            return changes

        def pick(*keys):
            for key in keys:
                if changes.get(key) is not None:
                    return changes[key]
            return None

        subject_id = pick('subject_id', 'subjectId')
        instructor_id = pick('instructor_id', 'instructorId', 'teacherId')
        room = pick('room')
        days = pick('days')

        return SessionDraft(
            subject_id=subject_id if subject_id is not None else current.subject_id,
            instructor_id=instructor_id if instructor_id is not None else current.instructor_id,
            room=room if room is not None else current.room,
            days=DaySet.of(days) if days is not None else current.days,
            time_interval=SchedulingService._merge_interval(current.time_interval, pick)
        )

    @staticmethod
    def _merge_interval(current: TimeInterval, pick) -> TimeInterval:
        interval = pick('time_interval')
        if isinstance(interval, TimeInterval):
            return interval
        if interval is not None:
            raise ValidationError("time_interval must be a TimeInterval", field='time_interval')

        start = pick('startMinutes', 'start_minutes')
        if start is None and pick('startTime', 'start_time') is not None:
            start = minutes_from_string(pick('startTime', 'start_time'))
        end = pick('endMinutes', 'end_minutes')
        if end is None and pick('endTime', 'end_time') is not None:
            end = minutes_from_string(pick('endTime', 'end_time'))

        if start is None and end is None:
            return current
        return TimeInterval(
            start if start is not None else current.start,
            end if end is not None else current.end
        )
