"""AWS Lambda handler for the clinic event planner calendar views."""
import json
import logging
import os
import time
from typing import Any, Dict

from processor.event_processor import EventProcessor
from processor.exceptions import InvalidRequestError
from scheduling.periods import add_months, next_quarter, previous_quarter, quarter_for_month
from views.planner_views import build_month_view, build_quarter_view, build_year_view

VIEWS = ('month', 'quarter', 'year')
NAVIGATION = {'previous': -1, 'next': 1}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _require_int(payload: Dict[str, Any], key: str, low: int, high: int) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"'{key}' must be an integer, got {value!r}")
    if not low <= value <= high:
        raise InvalidRequestError(f"'{key}' out of range {low}-{high}: {value}")
    return value


def build_view(
    payload: Dict[str, Any],
    processor: EventProcessor,
    default_view: str = 'month',
    upcoming_months: int = 3
) -> Dict[str, Any]:
    """
    Resolve a planner view request.

    Args:
        payload: Request with ``view``, ``year``, ``month``/``quarter``,
            optional ``navigate`` (``previous``/``next`` period) and
            ``events`` (raw event records)
        processor: Processor used to normalize the records
        default_view: View used when the request names none
        upcoming_months: Width of the month view's upcoming column

    Returns:
        Dict with the view and processing statistics

    Raises:
        InvalidRequestError: If the request is malformed
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request payload must be an object")

    view_name = payload.get('view') or default_view
    if view_name not in VIEWS:
        raise InvalidRequestError(
            f"Unknown view {view_name!r}, expected one of {', '.join(VIEWS)}"
        )

    records = payload.get('events', [])
    if not isinstance(records, list):
        raise InvalidRequestError("'events' must be a list of event records")

    navigate = payload.get('navigate')
    if navigate is None:
        step = 0
    elif isinstance(navigate, str) and navigate in NAVIGATION:
        step = NAVIGATION[navigate]
    else:
        raise InvalidRequestError(
            f"Unknown navigation {navigate!r}, expected 'previous' or 'next'"
        )

    year = _require_int(payload, 'year', 1, 9999)

    if view_name == 'month':
        month, year = add_months(_require_int(payload, 'month', 1, 12), year, step)
    elif view_name == 'quarter':
        if payload.get('quarter') is None and payload.get('month') is not None:
            quarter = quarter_for_month(_require_int(payload, 'month', 1, 12))
        else:
            quarter = _require_int(payload, 'quarter', 1, 4)
        if step > 0:
            quarter, year = next_quarter(quarter, year)
        elif step < 0:
            quarter, year = previous_quarter(quarter, year)
    else:
        year += step

    events = processor.process_records(records)

    if view_name == 'month':
        view = build_month_view(events, month, year, upcoming_months).to_dict()
    elif view_name == 'quarter':
        view = build_quarter_view(events, quarter, year).to_dict()
    else:
        view = build_year_view(events, year).to_dict()

    return {
        'view': view_name,
        'data': view,
        'statistics': {
            'records_received': len(records),
            'valid_events': len(events),
            'skipped_records': len(records) - len(events)
        }
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for planner calendar views.

    Args:
        event: View request payload
        context: Lambda context object

    Returns:
        Response dict with statusCode and the rendered view
    """
    # Read configuration from environment variables
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    default_view = os.environ.get('DEFAULT_VIEW', 'month')
    upcoming_months = int(os.environ.get('UPCOMING_MONTHS', '3'))

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info(
        "Planner view request started",
        extra={
            'default_view': default_view,
            'upcoming_months': upcoming_months
        }
    )

    try:
        result = build_view(
            event,
            EventProcessor(),
            default_view=default_view,
            upcoming_months=upcoming_months
        )
    except InvalidRequestError as e:
        duration = time.time() - start_time
        logger.warning(f"Rejected planner view request: {e}")
        return {
            'statusCode': 400,
            'body': json.dumps({
                'message': 'Invalid request',
                'error': str(e),
                'error_type': type(e).__name__,
                'duration_seconds': round(duration, 2)
            })
        }
    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Planner view request failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return {
            'statusCode': 500,
            'body': json.dumps({
                'message': 'Failed to build planner view',
                'error': str(e),
                'error_type': type(e).__name__,
                'duration_seconds': round(duration, 2)
            })
        }

    duration = time.time() - start_time
    result['statistics']['duration_seconds'] = round(duration, 2)

    logger.info(
        f"Built {result['view']} view",
        extra=result['statistics']
    )

    return {
        'statusCode': 200,
        'body': json.dumps({
            'message': 'View built successfully',
            **result
        })
    }
