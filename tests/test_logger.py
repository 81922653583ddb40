import logging
import pytest
from domain.exceptions import ConflictError, NotFoundError, ValidationError
from utils.logger import StructuredFormatter, log_request_metrics, metrics_collector


class TestStructuredFormatter:

    def test_error_context_is_written(self):
        record = logging.makeLogRecord({
            'msg': 'HIGH SEVERITY ERROR',
            'levelname': 'ERROR',
            'severity': 'high',
            'error_message': 'db down',
            'type': 'OperationalError',
            'endpoint': 'schedules.create_schedule',
            'method': 'POST',
            'url': 'http://localhost/api/schedules',
            'context': {'unhandled_exception': True}
        })

        output = StructuredFormatter().format(record)

        assert "'error_message': 'db down'" in output
        assert "'type': 'OperationalError'" in output
        assert "'endpoint': 'schedules.create_schedule'" in output
        assert "'unhandled_exception': True" in output

    def test_business_context_is_written(self):
        record = logging.makeLogRecord({'msg': 'Business Event', 'operation': 'create', 'entity_id': '7'})

        output = StructuredFormatter().format(record)

        assert "'operation': 'create'" in output
        assert "'entity_id': '7'" in output


class TestRequestMetrics:

    def _call(self, error):
        @log_request_metrics
        def endpoint():
            raise error

        with pytest.raises(type(error)):
            endpoint()
        return metrics_collector.performance_metrics[-1]['status_code']

    @pytest.mark.parametrize("error,status", [
        (NotFoundError('Session', 'x'), 404),
        (ValidationError("bad", field='room'), 422),
        (ConflictError([]), 409),
    ])
    def test_domain_errors_keep_their_status(self, error, status):
        errors_before = sum(metrics_collector.error_metrics.values())

        assert self._call(error) == status
        assert sum(metrics_collector.error_metrics.values()) == errors_before

    def test_unexpected_error_counts_as_500(self):
        before = metrics_collector.error_metrics['RuntimeError']

        assert self._call(RuntimeError("boom")) == 500
        assert metrics_collector.error_metrics['RuntimeError'] == before + 1

    def test_success_records_200(self):
        @log_request_metrics
        def endpoint():
            return "ok"

        assert endpoint() == "ok"
        assert metrics_collector.performance_metrics[-1]['status_code'] == 200
