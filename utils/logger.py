"""
Logging structuré du planificateur de séances
"""

import logging
import logging.handlers
import os
import sys
import time
import psutil
from datetime import datetime
from functools import wraps
from threading import Lock
from collections import defaultdict, deque


class StructuredFormatter(logging.Formatter):
    """Formatter structuré pour les logs en production"""

    CONTEXT_FIELDS = (
        'session_id', 'instructor_id', 'room', 'days',
        'operation', 'entity_type', 'entity_id', 'conflict_count',
        # contexte des erreurs de l'API
        'severity', 'error_message', 'type', 'endpoint', 'method', 'url',
        'context', 'traceback'
    )

    def format(self, record):
        log_obj = {
            'timestamp': datetime.now().isoformat(),
            'level': record.levelname,
            'module': record.name,
            'message': record.getMessage(),
            'function': record.funcName,
            'line': record.lineno
        }

        # Champs contextuels si présents
        for name in self.CONTEXT_FIELDS:
            if hasattr(record, name):
                log_obj[name] = getattr(record, name)
        if hasattr(record, 'execution_time'):
            log_obj['execution_time_ms'] = record.execution_time

        return str(log_obj)


def setup_logger(name: str = "scheduler") -> logging.Logger:
    """Configure le logger de l'application"""

    logger = logging.getLogger(name)

    # Éviter la double configuration
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)

    log_dir = os.environ.get('SCHEDULER_LOG_DIR', 'logs')
    os.makedirs(log_dir, exist_ok=True)

    # Fichier avec rotation
    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, 'application.log'),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(StructuredFormatter())

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


app_logger = setup_logger()


def log_performance(operation: str, execution_time: float, **kwargs):
    """Log spécialisé pour les performances"""
    app_logger.info(
        f"Performance: {operation}",
        extra={'execution_time': execution_time, **kwargs}
    )


def log_business_event(operation: str, entity_type: str, entity_id: str, **kwargs):
    """Log spécialisé pour les événements métier"""
    app_logger.info(
        f"Business Event: {operation} on {entity_type}",
        extra={
            'operation': operation,
            'entity_type': entity_type,
            'entity_id': entity_id,
            **kwargs
        }
    )


def log_schedule_conflict(instructor_id: str, room: str, conflicts: list):
    """Log spécialisé pour les séances refusées pour conflit"""
    app_logger.warning(
        f"Schedule conflict detected: {len(conflicts)} colliding session(s)",
        extra={
            'instructor_id': instructor_id,
            'room': room,
            'conflict_count': len(conflicts),
            'days': sorted({day.value for c in conflicts for day in c.days})
        }
    )


class MetricsCollector:
    """Collecteur de métriques en temps réel"""

    def __init__(self):
        self._lock = Lock()
        self.request_metrics = defaultdict(list)
        self.error_metrics = defaultdict(int)
        self.performance_metrics = deque(maxlen=1000)
        self.start_time = time.time()

    def record_request(self, endpoint, duration, status_code):
        with self._lock:
            metric = {
                'timestamp': time.time(),
                'endpoint': endpoint,
                'duration': duration,
                'status_code': status_code
            }
            self.request_metrics[endpoint].append(metric)
            self.performance_metrics.append(metric)

    def record_error(self, error_type):
        with self._lock:
            self.error_metrics[error_type] += 1

    def get_system_metrics(self):
        """Retourne les métriques système"""
        with self._lock:
            process = psutil.Process()
            return {
                'uptime': time.time() - self.start_time,
                'memory_mb': process.memory_info().rss / 1024 / 1024,
                'memory_percent': process.memory_percent(),
                'total_requests': len(self.performance_metrics),
                'error_count': sum(self.error_metrics.values()),
                'avg_response_time': self._calculate_avg_response_time()
            }

    def _calculate_avg_response_time(self):
        if not self.performance_metrics:
            return 0
        total = sum(m['duration'] for m in self.performance_metrics)
        return total / len(self.performance_metrics)

    def get_detailed_metrics(self):
        system = self.get_system_metrics()
        with self._lock:
            return {
                'system': system,
                'endpoints': {k: len(v) for k, v in self.request_metrics.items()},
                'errors': dict(self.error_metrics),
                'recent_requests': list(self.performance_metrics)[-100:]
            }


metrics_collector = MetricsCollector()


def log_request_metrics(f):
    """Décorateur: métriques et log de performance des endpoints"""
    @wraps(f)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        status_code = 200

        try:
            return f(*args, **kwargs)
        except Exception as e:
            # Erreurs métier attendues: statut HTTP réel, pas comptées comme erreurs serveur
            status_code = getattr(e, 'status_code', 500)
            if status_code >= 500:
                metrics_collector.record_error(type(e).__name__)
            raise
        finally:
            duration = (time.time() - start_time) * 1000  # en ms
            endpoint = getattr(f, '__name__', 'unknown')
            metrics_collector.record_request(endpoint, duration, status_code)
            log_performance(f"Request {endpoint}", duration)

    return wrapper
