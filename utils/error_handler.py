"""
Gestionnaire d'erreurs global de l'API
Traduit les erreurs du domaine en réponses JSON explicites
"""

import traceback
from datetime import datetime
from flask import jsonify, request
from werkzeug.exceptions import HTTPException
from domain.exceptions import ConflictError, NotFoundError, SchedulingError, ValidationError
from utils.logger import app_logger


class ErrorSeverity:
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorHandler:
    """Gestionnaire d'erreurs centralisé"""

    def __init__(self, app=None):
        self.app = app
        self.error_stats = {}
        if app:
            self.init_app(app)

    def init_app(self, app):
        """Initialise le gestionnaire d'erreurs avec l'app Flask"""
        app.register_error_handler(ValidationError, self.handle_validation_error)
        app.register_error_handler(NotFoundError, self.handle_not_found_error)
        app.register_error_handler(ConflictError, self.handle_conflict_error)
        app.register_error_handler(SchedulingError, self.handle_scheduling_error)
        app.register_error_handler(HTTPException, self.handle_http_error)
        app.register_error_handler(Exception, self.handle_generic_error)

    def _log_error(self, error, severity, context=None):
        """Log centralisé des erreurs avec contexte"""
        error_info = {
            'severity': severity,
            'error_message': str(error),
            'type': type(error).__name__,
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url,
            'context': context or {}
        }
        if severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            error_info['traceback'] = traceback.format_exc()

        error_key = f"{type(error).__name__}:{severity}"
        self.error_stats[error_key] = self.error_stats.get(error_key, 0) + 1

        if severity == ErrorSeverity.CRITICAL:
            app_logger.critical("CRITICAL ERROR", extra=error_info)
        elif severity == ErrorSeverity.HIGH:
            app_logger.error("HIGH SEVERITY ERROR", extra=error_info)
        elif severity == ErrorSeverity.MEDIUM:
            app_logger.warning("MEDIUM SEVERITY ERROR", extra=error_info)
        else:
            app_logger.info("LOW SEVERITY ERROR", extra=error_info)

    @staticmethod
    def _payload(error: SchedulingError, error_type: str) -> dict:
        return {
            'success': False,
            'error_type': error_type,
            'error_code': error.error_code,
            'message': error.message,
            'timestamp': datetime.now().isoformat()
        }

    def handle_validation_error(self, error):
        """Données invalides: créneau, jours, champ manquant"""
        self._log_error(error, ErrorSeverity.LOW, {'field': error.field})
        payload = self._payload(error, 'validation')
        payload['field'] = error.field
        return jsonify(payload), error.status_code

    def handle_not_found_error(self, error):
        self._log_error(error, ErrorSeverity.LOW)
        payload = self._payload(error, 'not_found')
        payload['entity'] = error.entity
        payload['entity_id'] = error.entity_id
        return jsonify(payload), error.status_code

    def handle_conflict_error(self, error):
        """Double réservation: détail par séance en conflit et par jour demandé"""
        self._log_error(error, ErrorSeverity.MEDIUM, {'conflict_count': len(error.conflicts)})
        payload = self._payload(error, 'conflict')
        payload.update(error.to_dict())
        return jsonify(payload), error.status_code

    def handle_scheduling_error(self, error):
        self._log_error(error, ErrorSeverity.MEDIUM)
        return jsonify(self._payload(error, 'business_logic')), error.status_code

    def handle_http_error(self, error):
        self._log_error(error, ErrorSeverity.LOW)
        return jsonify({
            'success': False,
            'error_type': 'http',
            'message': error.description
        }), error.code

    def handle_generic_error(self, error):
        """Gestionnaire générique: erreurs d'infrastructure et inattendues"""
        self._log_error(error, ErrorSeverity.HIGH, {'unhandled_exception': True})
        return jsonify({
            'success': False,
            'error_type': 'unexpected',
            'message': 'Erreur inattendue'
        }), 500

    def get_error_stats(self):
        return {
            'stats': self.error_stats,
            'total_errors': sum(self.error_stats.values()),
            'timestamp': datetime.now().isoformat()
        }


# Instance globale
error_handler = ErrorHandler()
