from collections import OrderedDict
from dataclasses import replace
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from domain.entities.session import Session
from domain.exceptions import NotFoundError
from domain.repositories.session_repository import (
    ChangeListener, ListenerRegistry, SessionRepository, SubjectDirectory
)


class InMemorySessionRepository(SessionRepository):
    """Repository de séances en mémoire (tests, démonstration)"""

    def __init__(self, sessions: Optional[List[Session]] = None):
        self._sessions: Dict[str, Session] = OrderedDict()
        self._listeners = ListenerRegistry()
        for session in sessions or []:
            self.insert_session(session)

    def list_sessions(self) -> List[Session]:
        return list(self._sessions.values())

    def find_by_id(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(str(session_id))

    def insert_session(self, session: Session) -> Session:
        session_id = session.session_id or uuid4().hex
        persisted = session.with_id(session_id)
        self._sessions[persisted.session_id] = persisted
        self._listeners.notify('insert', persisted)
        return persisted

    def update_session(self, session_id: str, session: Session) -> None:
        session_id = str(session_id)
        if session_id not in self._sessions:
            raise NotFoundError('Session', session_id)
        updated = replace(session, session_id=session_id)
        self._sessions[session_id] = updated
        self._listeners.notify('update', updated)

    def delete_session(self, session_id: str) -> bool:
        removed = self._sessions.pop(str(session_id), None)
        if removed is None:
            return False
        self._listeners.notify('delete', removed)
        return True

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        return self._listeners.add(listener)


class InMemorySubjectDirectory(SubjectDirectory):
    """Matières en mémoire: {subject_id: (nom, department_id)}"""

    def __init__(self, subjects: Optional[Dict[str, tuple]] = None):
        self._subjects = dict(subjects or {})

    def add(self, subject_id: str, name: str, department_id: str) -> None:
        self._subjects[subject_id] = (name, department_id)

    def department_for(self, subject_id: str) -> Optional[str]:
        entry = self._subjects.get(subject_id)
        return entry[1] if entry else None

    def subject_name(self, subject_id: str) -> Optional[str]:
        entry = self._subjects.get(subject_id)
        return entry[0] if entry else None
