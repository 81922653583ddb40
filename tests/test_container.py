import pytest
from domain.repositories.session_repository import SessionRepository, SubjectDirectory
from domain.services.conflict_detector import ConflictDetector
from infrastructure.container import Container
from infrastructure.repositories.memory_session_repository import (
    InMemorySessionRepository, InMemorySubjectDirectory
)


class NeedsRepository:
    def __init__(self, repository: SessionRepository, label: str = "default"):
        self.repository = repository
        self.label = label


class TestContainer:

    def setup_method(self):
        self.container = Container()

    def test_factory_builds_new_instance_each_time(self):
        self.container.register_factory(SessionRepository, InMemorySessionRepository)

        assert self.container.get(SessionRepository) is not self.container.get(SessionRepository)

    def test_singleton_is_cached(self):
        self.container.register_singleton(ConflictDetector, ConflictDetector)

        assert self.container.get(ConflictDetector) is self.container.get(ConflictDetector)

    def test_constructor_dependencies_resolved(self):
        repository = InMemorySessionRepository()
        self.container.register_instance(SessionRepository, repository)
        self.container.register_singleton(NeedsRepository, NeedsRepository)

        service = self.container.get(NeedsRepository)

        assert service.repository is repository
        assert service.label == "default"

    def test_unregistered_service(self):
        with pytest.raises(ValueError):
            self.container.get(SubjectDirectory)

    def test_reset(self):
        self.container.register_instance(SubjectDirectory, InMemorySubjectDirectory())
        assert self.container.is_registered(SubjectDirectory)

        self.container.reset()

        assert not self.container.is_registered(SubjectDirectory)
