import inspect
from typing import Any, Callable, Dict, Type, TypeVar

T = TypeVar('T')


class Container:
    """Container d'injection de dépendances"""

    def __init__(self):
        self._services: Dict[Type, Type] = {}
        self._singletons: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable] = {}

    def register_singleton(self, interface: Type[T], implementation: Type[T]) -> None:
        """Enregistre un service instancié une seule fois"""
        self._services[interface] = implementation
        self._singletons.pop(interface, None)

    def register_factory(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """Enregistre une factory appelée à chaque résolution

        Les repositories dépendent de la session SQLAlchemy de la requête
        courante: ils ne sont jamais mis en cache.
        """
        self._factories[interface] = factory
        self._singletons.pop(interface, None)

    def register_instance(self, interface: Type[T], instance: T) -> None:
        self._singletons[interface] = instance

    def is_registered(self, interface: Type) -> bool:
        return (interface in self._singletons
                or interface in self._factories
                or interface in self._services)

    def get(self, interface: Type[T]) -> T:
        """Récupère une instance du service demandé"""
        if interface in self._singletons:
            return self._singletons[interface]

        if interface in self._factories:
            return self._factories[interface]()

        if interface in self._services:
            instance = self._create_instance(self._services[interface])
            self._singletons[interface] = instance
            return instance

        raise ValueError(f"Service {interface.__name__} not registered")

    def reset(self) -> None:
        self._services.clear()
        self._singletons.clear()
        self._factories.clear()

    def _create_instance(self, cls: Type[T]) -> T:
        """Crée une instance en résolvant les dépendances annotées du constructeur"""
        signature = inspect.signature(cls.__init__)
        params = {}

        for param_name, param in signature.parameters.items():
            if param_name == 'self' or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            if self.is_registered(param.annotation):
                params[param_name] = self.get(param.annotation)
            elif param.default is not param.empty:
                params[param_name] = param.default

        return cls(**params)


# Instance globale du container
container = Container()
