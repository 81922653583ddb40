from flask_sqlalchemy import SQLAlchemy

from domain.repositories.session_repository import SessionRepository, SubjectDirectory
from domain.services.conflict_detector import ConflictDetector
from infrastructure.container import container
from infrastructure.repositories.sqlalchemy_session_repository import (
    SqlAlchemySessionRepository, SqlAlchemySubjectDirectory
)


def configure_container(db: SQLAlchemy) -> None:
    """Configure le container d'injection de dépendances"""

    # Repositories - factories liées à la session DB (scoped par requête)
    container.register_factory(
        SessionRepository,
        lambda: SqlAlchemySessionRepository(db.session)
    )

    container.register_factory(
        SubjectDirectory,
        lambda: SqlAlchemySubjectDirectory(db.session)
    )

    # Domain services - sans état
    container.register_singleton(ConflictDetector, ConflictDetector)
