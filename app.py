#!/usr/bin/env python3
"""
Application Flask - Planification des séances récurrentes
"""

import os
from datetime import datetime

from flask import Flask, jsonify

from application.services.scheduling_service import DEFAULT_TIMEZONE, SchedulingService
from controllers.schedule_controller import ScheduleController
from infrastructure.config import configure_container
from models import db
from utils.error_handler import error_handler
from utils.logger import app_logger, metrics_collector


def _default_database_uri() -> str:
    db_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'instance', 'schedule.db')
    return f'sqlite:///{db_path}'


def create_app(test_config=None):
    """Factory pour créer l'application Flask"""
    app = Flask(__name__)

    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get(
        'SCHEDULER_DATABASE_URI', _default_database_uri()
    )
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SCHEDULER_TIMEZONE'] = os.environ.get('SCHEDULER_TIMEZONE', DEFAULT_TIMEZONE)

    if test_config:
        app.config.update(test_config)

    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
        db_file = app.config['SQLALCHEMY_DATABASE_URI'][len('sqlite:///'):]
        if db_file and db_file != ':memory:':
            os.makedirs(os.path.dirname(os.path.abspath(db_file)), exist_ok=True)

    db.init_app(app)

    # Configuration du container d'injection de dépendances
    configure_container(db)

    with app.app_context():
        db.create_all()

    error_handler.init_app(app)

    scheduling_service = SchedulingService(timezone_name=app.config['SCHEDULER_TIMEZONE'])
    app.extensions['scheduling_service'] = scheduling_service

    schedule_controller = ScheduleController(scheduling_service)
    app.register_blueprint(schedule_controller.blueprint)

    @app.route('/api/error-stats')
    def get_error_stats():
        """API pour récupérer les statistiques d'erreurs"""
        return jsonify(error_handler.get_error_stats())

    @app.route('/api/metrics')
    def get_metrics():
        """API pour récupérer les métriques système et performance"""
        return jsonify(metrics_collector.get_detailed_metrics())

    @app.route('/api/health')
    def health_check():
        """API de santé pour monitoring externe"""
        system_metrics = metrics_collector.get_system_metrics()
        return jsonify({
            'status': 'healthy',
            'timestamp': datetime.now().isoformat(),
            'uptime': system_metrics['uptime'],
            'memory_usage': system_metrics['memory_percent']
        })

    app_logger.info(f"Scheduler app created ({app.config['SQLALCHEMY_DATABASE_URI']})")
    return app


if __name__ == '__main__':
    create_app().run(debug=True, host='0.0.0.0', port=5007)
