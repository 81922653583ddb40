from typing import Dict, List, Optional


class SchedulingError(Exception):
    """Exception de base du planificateur de séances"""

    error_code = "SCHEDULING_ERROR"
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(SchedulingError, ValueError):
    """Données de séance invalides"""

    error_code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class InvalidIntervalError(ValidationError):
    """Créneau horaire vide, inversé ou hors de la journée"""

    error_code = "INVALID_INTERVAL"

    def __init__(self, message: str):
        super().__init__(message, field="time_interval")


class EmptyDaySetError(ValidationError):
    """Aucun jour de récurrence fourni"""

    error_code = "EMPTY_DAY_SET"

    def __init__(self, message: str = "At least one weekday is required"):
        super().__init__(message, field="days")


class InvalidWeekdayError(ValidationError):
    """Nom de jour inconnu"""

    error_code = "INVALID_WEEKDAY"

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid weekday: {value!r}", field="days")


class NotFoundError(SchedulingError, LookupError):
    """Séance (ou matière) introuvable"""

    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class ConflictError(SchedulingError):
    """La séance proposée réserve deux fois un enseignant ou une salle"""

    error_code = "SCHEDULE_CONFLICT"
    status_code = 409

    def __init__(self, conflicts: List, conflicts_by_day: Optional[Dict] = None):
        self.conflicts = list(conflicts)
        self.conflicts_by_day = conflicts_by_day or {}

        details = "; ".join(c.describe() for c in self.conflicts)
        super().__init__(f"Schedule conflict detected: {details}")

    def to_dict(self) -> dict:
        return {
            'conflicts': [c.to_dict() for c in self.conflicts],
            'days': {
                day.value: [c.to_dict() for c in day_conflicts]
                for day, day_conflicts in self.conflicts_by_day.items()
            }
        }
