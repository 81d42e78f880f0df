"""Integration tests for Lambda handler."""
import json
import logging
import os
from unittest.mock import Mock, patch

import pytest

from lambda_function import JsonFormatter, build_view, lambda_handler, setup_logging
from processor.event_processor import EventProcessor
from processor.exceptions import InvalidRequestError


@pytest.fixture
def mock_env():
    """Set up environment variables for testing."""
    env_vars = {
        'LOG_LEVEL': 'INFO',
        'DEFAULT_VIEW': 'month',
        'UPCOMING_MONTHS': '3'
    }
    with patch.dict(os.environ, env_vars):
        yield env_vars


@pytest.fixture
def mock_context():
    """Create a mock Lambda context."""
    context = Mock()
    context.function_name = 'test-function'
    context.memory_limit_in_mb = 128
    context.aws_request_id = 'test-request-id'
    return context


@pytest.fixture
def sample_records():
    """Create sample event store records."""
    return [
        {
            'id': 1,
            'title': 'Flu Shot Campaign',
            'start_month': 10,
            'start_year': 2024,
            'end_month': 11,
            'end_year': 2024,
            'prep_months_needed': 2
        },
        {
            'id': 2,
            'title': 'Heart Health Month',
            'month': 2,
            'year': 2023,
            'is_recurring': True,
            'prep_start_date': '2022-12-01'
        },
        {
            'id': 3,
            'title': '',
            'start_month': 5,
            'start_year': 2024
        }
    ]


class TestLambdaHandler:
    """Test cases for Lambda handler."""

    def test_month_view(self, mock_env, mock_context, sample_records):
        """Test successful month view request."""
        response = lambda_handler(
            {'view': 'month', 'month': 8, 'year': 2024, 'events': sample_records},
            mock_context
        )

        assert response['statusCode'] == 200
        body = json.loads(response['body'])
        assert body['message'] == 'View built successfully'
        assert body['view'] == 'month'
        assert body['data']['title'] == 'August 2024'
        assert [c['event_id'] for c in body['data']['prep']] == ['1']
        assert body['data']['prep'][0]['prep_label'] == 'Start Prep'
        assert [c['event_id'] for c in body['data']['upcoming']] == ['1']
        assert body['statistics']['records_received'] == 3
        assert body['statistics']['valid_events'] == 2
        assert body['statistics']['skipped_records'] == 1
        assert 'duration_seconds' in body['statistics']

    def test_default_view_from_environment(self, mock_context, sample_records):
        with patch.dict(os.environ, {'DEFAULT_VIEW': 'year', 'LOG_LEVEL': 'INFO'}):
            response = lambda_handler(
                {'year': 2024, 'events': sample_records}, mock_context
            )

        assert response['statusCode'] == 200
        body = json.loads(response['body'])
        assert body['view'] == 'year'
        assert len(body['data']['months']) == 12

    def test_upcoming_months_from_environment(self, mock_context, sample_records):
        with patch.dict(os.environ, {'UPCOMING_MONTHS': '1', 'LOG_LEVEL': 'INFO'}):
            response = lambda_handler(
                {'view': 'month', 'month': 8, 'year': 2024, 'events': sample_records},
                mock_context
            )

        body = json.loads(response['body'])
        assert body['data']['upcoming'] == []

    def test_quarter_view_from_month(self, mock_env, mock_context, sample_records):
        """Test quarter derived from month when no quarter is given."""
        response = lambda_handler(
            {'view': 'quarter', 'month': 11, 'year': 2024, 'events': sample_records},
            mock_context
        )

        assert response['statusCode'] == 200
        body = json.loads(response['body'])
        assert body['data']['quarter'] == 4
        assert body['data']['title'] == 'Q4 2024'

    @pytest.mark.parametrize("payload", [
        {'view': 'week', 'year': 2024, 'month': 1, 'events': []},
        {'view': 'month', 'year': 2024, 'events': []},
        {'view': 'month', 'year': 2024, 'month': 13, 'events': []},
        {'view': 'quarter', 'year': 2024, 'quarter': 5, 'events': []},
        {'view': 'year', 'year': '2024', 'events': []},
        {'view': 'year', 'year': 2024, 'events': {'id': 1}},
        {'view': 'month', 'year': 2024, 'month': 1, 'navigate': 'forward'},
        {'view': 'month', 'year': 2024, 'month': 1, 'navigate': ['next']},
    ])
    def test_invalid_request(self, mock_env, mock_context, payload):
        """Test malformed requests return 400."""
        response = lambda_handler(payload, mock_context)

        assert response['statusCode'] == 400
        body = json.loads(response['body'])
        assert body['message'] == 'Invalid request'
        assert body['error_type'] == 'InvalidRequestError'

    def test_wrongly_typed_record_is_skipped(self, mock_env, mock_context):
        """Test a record with a numeric title does not fail the request."""
        records = [
            {'id': 1, 'title': 123, 'start_month': 1, 'start_year': 2024},
            {'id': 2, 'title': 'ok', 'start_month': 1, 'start_year': 2024},
        ]

        response = lambda_handler(
            {'view': 'month', 'month': 1, 'year': 2024, 'events': records},
            mock_context
        )

        assert response['statusCode'] == 200
        body = json.loads(response['body'])
        assert body['statistics']['valid_events'] == 1
        assert body['statistics']['skipped_records'] == 1
        assert [c['title'] for c in body['data']['this_month']] == ['ok']

    def test_last_supported_year_with_wrap_event(self, mock_env, mock_context):
        records = [{
            'id': 1, 'title': 'Winter Wellness', 'start_month': 11,
            'start_year': 2024, 'end_month': 2, 'is_recurring': True
        }]

        response = lambda_handler(
            {'view': 'year', 'year': 9999, 'events': records}, mock_context
        )

        assert response['statusCode'] == 200

    @patch('lambda_function.build_view')
    def test_unexpected_error(self, mock_build_view, mock_env, mock_context):
        """Test unexpected failures return 500."""
        mock_build_view.side_effect = RuntimeError("boom")

        response = lambda_handler({'view': 'year', 'year': 2024}, mock_context)

        assert response['statusCode'] == 500
        body = json.loads(response['body'])
        assert body['message'] == 'Failed to build planner view'
        assert body['error'] == 'boom'
        assert body['error_type'] == 'RuntimeError'


class TestBuildView:
    """Test cases for build_view."""

    def test_rejects_non_object_payload(self):
        with pytest.raises(InvalidRequestError):
            build_view(['month'], EventProcessor())

    def test_events_default_to_empty(self):
        result = build_view({'view': 'year', 'year': 2024}, EventProcessor())

        assert result['statistics'] == {
            'records_received': 0,
            'valid_events': 0,
            'skipped_records': 0
        }


    @pytest.mark.parametrize("payload,expected", [
        ({'view': 'month', 'month': 12, 'year': 2024, 'navigate': 'next'},
         ('month', 1, 2025, 'January 2025')),
        ({'view': 'month', 'month': 1, 'year': 2025, 'navigate': 'previous'},
         ('month', 12, 2024, 'December 2024')),
        ({'view': 'quarter', 'quarter': 1, 'year': 2025, 'navigate': 'previous'},
         ('quarter', 4, 2024, 'Q4 2024')),
        ({'view': 'quarter', 'quarter': 4, 'year': 2024, 'navigate': 'next'},
         ('quarter', 1, 2025, 'Q1 2025')),
    ])
    def test_navigation(self, payload, expected):
        """Test stepping to the previous or next period."""
        key, number, year, title = expected

        data = build_view(payload, EventProcessor())['data']

        assert (data[key], data['year'], data['title']) == (number, year, title)

    def test_year_navigation(self):
        data = build_view(
            {'view': 'year', 'year': 2024, 'navigate': 'next'}, EventProcessor()
        )['data']

        assert data['year'] == 2025
        assert data['title'] == '2025'


class TestLogging:
    """Test cases for logging setup."""

    def test_setup_logging_level(self):
        setup_logging('DEBUG')

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, JsonFormatter)

        setup_logging('INFO')

    def test_setup_logging_unknown_level_defaults_to_info(self):
        setup_logging('CHATTY')

        assert logging.getLogger().level == logging.INFO

    def test_json_formatter(self):
        record = logging.LogRecord(
            'planner', logging.WARNING, __file__, 1, 'hello %s', ('world',), None
        )

        data = json.loads(JsonFormatter().format(record))

        assert data['level'] == 'WARNING'
        assert data['message'] == 'hello world'
        assert data['logger'] == 'planner'
        assert 'timestamp' in data
