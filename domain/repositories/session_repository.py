from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from domain.entities.session import Session

ChangeListener = Callable[[str, Session], None]


class SessionRepository(ABC):
    """Interface du repository des séances (collaborateur de stockage)"""

    @abstractmethod
    def list_sessions(self) -> List[Session]:
        """Récupère toutes les séances"""
        pass

    @abstractmethod
    def find_by_id(self, session_id: str) -> Optional[Session]:
        """Trouve une séance par son ID"""
        pass

    @abstractmethod
    def insert_session(self, session: Session) -> Session:
        """Persiste une nouvelle séance et la retourne avec son ID attribué"""
        pass

    @abstractmethod
    def update_session(self, session_id: str, session: Session) -> None:
        """Remplace les champs d'une séance; NotFoundError si absente"""
        pass

    @abstractmethod
    def delete_session(self, session_id: str) -> bool:
        """Supprime une séance; False si elle n'existait pas"""
        pass

    @abstractmethod
    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Abonne un listener aux écritures ('insert', 'update', 'delete').

        Retourne la fonction de désabonnement.
        """
        pass


class SubjectDirectory(ABC):
    """Interface de consultation des matières"""

    @abstractmethod
    def department_for(self, subject_id: str) -> Optional[str]:
        """Département d'une matière, None si la matière est inconnue"""
        pass

    @abstractmethod
    def subject_name(self, subject_id: str) -> Optional[str]:
        """Nom d'affichage d'une matière"""
        pass


class ListenerRegistry:
    """Liste de listeners partagée par les implémentations de repository"""

    def __init__(self):
        self._listeners: List[ChangeListener] = []

    def add(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, event: str, session: Session) -> None:
        for listener in list(self._listeners):
            listener(event, session)
