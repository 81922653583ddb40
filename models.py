import json
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Index

db = SQLAlchemy()


class Department(db.Model):
    """Modèle des départements"""
    __tablename__ = 'departments'

    id = db.Column(db.String(50), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.now)

    def to_dict(self):
        return {'id': self.id, 'name': self.name}


class Subject(db.Model):
    """Modèle des matières, rattachées à un département"""
    __tablename__ = 'subjects'

    id = db.Column(db.String(50), primary_key=True)
    subject_name = db.Column(db.String(200), nullable=False)
    department_id = db.Column(db.String(50), db.ForeignKey('departments.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.now)

    def to_dict(self):
        return {
            'id': self.id,
            'subjectName': self.subject_name,
            'departmentId': self.department_id
        }


class Schedule(db.Model):
    """Modèle des séances récurrentes: un enregistrement par séance, tous jours confondus"""
    __tablename__ = 'schedules'

    id = db.Column(db.Integer, primary_key=True)

    subject_id = db.Column(db.String(50), nullable=False, index=True)
    instructor_id = db.Column(db.String(100), nullable=False, index=True)
    room = db.Column(db.String(100), nullable=False, index=True)

    # Liste JSON des jours, ex. ["Monday", "Wednesday"]
    days = db.Column(db.Text, nullable=False)

    # Minutes depuis minuit
    start_minutes = db.Column(db.Integer, nullable=False)
    end_minutes = db.Column(db.Integer, nullable=False)

    # Dérivé de la matière à la création, jamais modifié ensuite
    department_id = db.Column(db.String(50), index=True)

    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        Index('idx_instructor_time', 'instructor_id', 'start_minutes', 'end_minutes'),
        Index('idx_room_time', 'room', 'start_minutes', 'end_minutes'),
    )

    @property
    def day_names(self):
        return json.loads(self.days) if self.days else []

    def __repr__(self):
        return f'<Schedule {self.id}: {self.subject_id} - {self.instructor_id} - {self.room}>'
