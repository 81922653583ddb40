import json
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from domain.entities.session import Session
from domain.exceptions import NotFoundError
from domain.repositories.session_repository import (
    ChangeListener, ListenerRegistry, SessionRepository, SubjectDirectory
)
from domain.value_objects.day_set import DaySet
from domain.value_objects.time_interval import TimeInterval
from models import Schedule as ScheduleModel, Subject as SubjectModel


class SqlAlchemySessionRepository(SessionRepository):
    """Implémentation SQLAlchemy du repository de séances

    Les erreurs de base de données sont propagées telles quelles après
    rollback de la session.
    """

    def __init__(self, session: DbSession):
        self._session = session
        self._listeners = ListenerRegistry()

    def list_sessions(self) -> List[Session]:
        models = self._session.query(ScheduleModel).order_by(ScheduleModel.id).all()
        return [self._to_domain(model) for model in models]

    def find_by_id(self, session_id: str) -> Optional[Session]:
        model = self._find_model(session_id)
        return self._to_domain(model) if model else None

    def insert_session(self, session: Session) -> Session:
        model = self._create_model(session)
        self._session.add(model)
        self._commit()

        persisted = self._to_domain(model)
        self._listeners.notify('insert', persisted)
        return persisted

    def update_session(self, session_id: str, session: Session) -> None:
        model = self._find_model(session_id)
        if model is None:
            raise NotFoundError('Session', session_id)

        self._update_model(model, session)
        self._commit()
        self._listeners.notify('update', self._to_domain(model))

    def delete_session(self, session_id: str) -> bool:
        model = self._find_model(session_id)
        if model is None:
            return False

        removed = self._to_domain(model)
        self._session.delete(model)
        self._commit()
        self._listeners.notify('delete', removed)
        return True

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        return self._listeners.add(listener)

    def _find_model(self, session_id) -> Optional[ScheduleModel]:
        try:
            model_id = int(session_id)
        except (TypeError, ValueError):
            return None
        return self._session.query(ScheduleModel).filter_by(id=model_id).first()

    def _commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def _to_domain(self, model: ScheduleModel) -> Session:
        """Convertit un modèle SQLAlchemy en entité domaine"""
        return Session(
            session_id=str(model.id),
            subject_id=model.subject_id,
            instructor_id=model.instructor_id,
            room=model.room,
            days=DaySet.of(model.day_names),
            time_interval=TimeInterval(model.start_minutes, model.end_minutes),
            department_id=model.department_id,
            created_at=model.created_at
        )

    def _create_model(self, session: Session) -> ScheduleModel:
        return ScheduleModel(
            subject_id=session.subject_id,
            instructor_id=session.instructor_id,
            room=session.room,
            days=json.dumps(session.days.names()),
            start_minutes=session.time_interval.start,
            end_minutes=session.time_interval.end,
            department_id=session.department_id,
            created_at=session.created_at
        )

    def _update_model(self, model: ScheduleModel, session: Session) -> None:
        """department_id et created_at ne sont jamais modifiés"""
        model.subject_id = session.subject_id
        model.instructor_id = session.instructor_id
        model.room = session.room
        model.days = json.dumps(session.days.names())
        model.start_minutes = session.time_interval.start
        model.end_minutes = session.time_interval.end


class SqlAlchemySubjectDirectory(SubjectDirectory):
    """Consultation des matières en base"""

    def __init__(self, session: DbSession):
        self._session = session

    def department_for(self, subject_id: str) -> Optional[str]:
        model = self._session.query(SubjectModel).filter_by(id=subject_id).first()
        return model.department_id if model else None

    def subject_name(self, subject_id: str) -> Optional[str]:
        model = self._session.query(SubjectModel).filter_by(id=subject_id).first()
        return model.subject_name if model else None
