import pytest
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError
from app import create_app
from domain.entities.session import Session
from domain.value_objects.day_set import DaySet
from domain.value_objects.time_interval import TimeInterval
from infrastructure.repositories.sqlalchemy_session_repository import SqlAlchemySessionRepository
from models import db, Department, Subject


def make_session(room="R1"):
    return Session(
        session_id=None,
        subject_id='MATH101',
        instructor_id='T1',
        room=room,
        days=DaySet.of(["Monday"]),
        time_interval=TimeInterval.from_strings("08:00", "09:00"),
        department_id='SCI'
    )


class TestSqlAlchemySessionRepository:
    """Tests du repository SQLAlchemy (SQLite en mémoire)"""

    def setup_method(self):
        self.app = create_app({
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': 'sqlite://'
        })
        self.ctx = self.app.app_context()
        self.ctx.push()
        db.session.add(Department(id='SCI', name='Sciences'))
        db.session.add(Subject(id='MATH101', subject_name='Algebra', department_id='SCI'))
        db.session.commit()
        self.repository = SqlAlchemySessionRepository(db.session)

    def teardown_method(self):
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    def test_insert_and_find(self):
        persisted = self.repository.insert_session(make_session())

        assert persisted.session_id is not None
        assert self.repository.find_by_id(persisted.session_id) == persisted

    def test_failed_commit_rolls_back_and_propagates(self):
        events = []
        self.repository.subscribe(lambda kind, session: events.append(kind))

        with patch.object(db.session, 'commit', side_effect=SQLAlchemyError("db down")), \
                patch.object(db.session, 'rollback', wraps=db.session.rollback) as rollback:
            with pytest.raises(SQLAlchemyError):
                self.repository.insert_session(make_session())

            rollback.assert_called_once()

        assert self.repository.list_sessions() == []
        assert events == []

    def test_failed_commit_on_update_keeps_stored_values(self):
        persisted = self.repository.insert_session(make_session())

        with patch.object(db.session, 'commit', side_effect=SQLAlchemyError("db down")):
            with pytest.raises(SQLAlchemyError):
                self.repository.update_session(persisted.session_id, make_session(room="R9"))

        assert self.repository.find_by_id(persisted.session_id).room == "R1"

    def test_storage_failure_returns_500(self):
        client = self.app.test_client()
        body = {
            'subjectId': 'MATH101',
            'instructorId': 'T1',
            'room': 'R1',
            'days': ['Monday'],
            'startTime': '08:00',
            'endTime': '09:00'
        }

        with patch.object(db.session, 'commit', side_effect=SQLAlchemyError("db down")):
            response = client.post('/api/schedules', json=body)

        assert response.status_code == 500
        assert response.get_json()['error_type'] == 'unexpected'
        assert self.repository.list_sessions() == []
