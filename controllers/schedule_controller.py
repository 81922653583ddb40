from flask import request

from application.services.scheduling_service import SchedulingService
from controllers.base_controller import BaseController
from domain.exceptions import ValidationError
from utils.logger import log_request_metrics


class ScheduleController(BaseController):
    """Contrôleur pour la gestion des séances récurrentes"""

    def __init__(self, scheduling_service: SchedulingService):
        self.scheduling_service = scheduling_service
        super().__init__('schedules', url_prefix='/api/schedules')

    def _register_routes(self):
        """Enregistrement des routes pour les séances"""
        self.blueprint.route('', methods=['GET'])(self.list_schedules)
        self.blueprint.route('', methods=['POST'])(self.create_schedule)
        self.blueprint.route('/check', methods=['POST'])(self.check_availability)
        self.blueprint.route('/bulk_delete', methods=['POST'])(self.bulk_delete)
        self.blueprint.route('/occurrences', methods=['GET'])(self.list_occurrences)
        self.blueprint.route('/<session_id>', methods=['GET'])(self.get_schedule)
        self.blueprint.route('/<session_id>', methods=['PUT'])(self.update_schedule)
        self.blueprint.route('/<session_id>', methods=['DELETE'])(self.delete_schedule)

    @log_request_metrics
    def list_schedules(self):
        """API: séances, filtrables par département et enseignant"""
        sessions = self.scheduling_service.list_sessions(
            department_id=request.args.get('department'),
            instructor_id=request.args.get('instructor')
        )
        return self.success_response([s.to_dict() for s in sessions])

    @log_request_metrics
    def create_schedule(self):
        """API: création d'une séance après détection des conflits"""
        session = self.scheduling_service.create(self.get_json_data())
        return self.success_response(session.to_dict(), 'Schedule added successfully', 201)

    @log_request_metrics
    def get_schedule(self, session_id):
        return self.success_response(self.scheduling_service.get(session_id).to_dict())

    @log_request_metrics
    def update_schedule(self, session_id):
        data = self.get_json_data()
        if not data:
            raise ValidationError("No changes provided")
        session = self.scheduling_service.update(session_id, data)
        return self.success_response(session.to_dict(), 'Schedule updated successfully')

    @log_request_metrics
    def delete_schedule(self, session_id):
        self.scheduling_service.delete(session_id)
        return self.success_response(message='Schedule entry deleted')

    @log_request_metrics
    def bulk_delete(self):
        """API: suppression multiple, résultat détaillé par ID"""
        ids = self.get_json_data().get('ids')
        if not isinstance(ids, list) or not ids:
            raise ValidationError("Please select at least one schedule to delete", field='ids')

        results = self.scheduling_service.bulk_delete(ids)
        return self.success_response({
            'deleted': [sid for sid, ok in results.items() if ok],
            'not_found': [sid for sid, ok in results.items() if not ok]
        })

    @log_request_metrics
    def check_availability(self):
        """API: disponibilité jour par jour d'une séance proposée, sans l'enregistrer"""
        report = self.scheduling_service.check_availability(
            self.get_json_data(),
            exclude_id=request.args.get('exclude')
        )
        return self.success_response({
            'available': not any(report.values()),
            'days': {
                day.value: {
                    'available': not conflicts,
                    'conflicts': [c.to_dict() for c in conflicts]
                }
                for day, conflicts in report.items()
            }
        })

    @log_request_metrics
    def list_occurrences(self):
        """API: événements de calendrier pour la semaine commençant le lundi ?week="""
        occurrences = self.scheduling_service.list_occurrences(
            week_start=self.get_date_arg('week'),
            department_id=request.args.get('department'),
            instructor_id=request.args.get('instructor')
        )
        return self.success_response([o.to_dict() for o in occurrences])
