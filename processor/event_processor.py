"""Event processor for validating and normalizing event store records."""
import hashlib
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from processor.exceptions import InvalidEventError
from processor.models import Event

logger = logging.getLogger(__name__)


class EventProcessor:
    """Processor turning raw event records into resolver-ready Events."""

    DATE_FORMATS = [
        '%Y-%m-%d',             # ISO 8601
        '%Y-%m-%dT%H:%M:%S',    # ISO 8601 with time
        '%m/%d/%Y',             # US format
        '%B %d, %Y',            # Full month name
        '%b %d, %Y',            # Abbreviated month name
        '%Y/%m/%d',             # Alternative ISO format
    ]

    def process_records(self, records: List[Dict[str, Any]]) -> List[Event]:
        """
        Normalize raw event records, skipping invalid ones.

        Args:
            records: Event rows as delivered by the event store

        Returns:
            List of valid Event objects in input order
        """
        events = []

        for record in records:
            try:
                events.append(self.parse_record(record))
            except InvalidEventError as e:
                logger.warning(
                    f"Skipping event record {e.record_id!r}: {e}"
                )
                continue

        logger.info(
            f"Processed {len(events)} valid events out of "
            f"{len(records)} total records"
        )
        return events

    def parse_record(self, record: Dict[str, Any]) -> Event:
        """
        Normalize a single event record.

        The legacy ``month``/``year`` columns are used when
        ``start_month``/``start_year`` are missing.

        Args:
            record: Raw event row

        Returns:
            Event object

        Raises:
            InvalidEventError: If the record cannot be normalized
        """
        if not isinstance(record, dict):
            raise InvalidEventError(
                f"Expected a mapping, got {type(record).__name__}"
            )

        record_id = record.get('id')
        title = self._to_text(record.get('title'), 'title', record_id).strip()
        if not title:
            raise InvalidEventError("Missing required field: title", record_id)

        start_month = self._to_month(
            self._first_present(record, 'start_month', 'month'),
            'start_month',
            record_id
        )
        start_year = self._to_year(
            self._first_present(record, 'start_year', 'year'),
            'start_year',
            record_id
        )

        end_month = None
        if record.get('end_month') is not None:
            end_month = self._to_month(record['end_month'], 'end_month', record_id)

        end_year = None
        if record.get('end_year') is not None:
            end_year = self._to_year(record['end_year'], 'end_year', record_id)
            if end_month is None:
                raise InvalidEventError(
                    "end_year given without end_month", record_id
                )

        is_recurring = bool(record.get('is_recurring'))

        if end_year is not None and not is_recurring:
            if (end_year, end_month) < (start_year, start_month):
                raise InvalidEventError(
                    f"Event ends before it starts: "
                    f"{start_month}/{start_year} - {end_month}/{end_year}",
                    record_id
                )

        prep_start_date = None
        raw_prep_date = record.get('prep_start_date')
        if raw_prep_date:
            prep_start_date = self._normalize_date(raw_prep_date)
            if prep_start_date is None:
                raise InvalidEventError(
                    f"Invalid prep_start_date format: {raw_prep_date}",
                    record_id
                )

        prep_months_needed = self._to_int(
            record.get('prep_months_needed') or 0,
            'prep_months_needed',
            record_id
        )
        if prep_months_needed < 0:
            raise InvalidEventError(
                f"prep_months_needed must not be negative: {prep_months_needed}",
                record_id
            )

        if record_id is not None:
            event_id = str(record_id)
        else:
            event_id = self.generate_event_id(
                title=title,
                start=f"{start_year:04d}-{start_month:02d}",
                end=f"{end_year or ''}-{end_month or ''}"
            )

        description = self._to_text(
            record.get('description'), 'description', record_id
        )
        tags = self._to_tags(record.get('tags'), record_id)

        return Event(
            event_id=event_id,
            title=title,
            description=description,
            tags=tags,
            start_month=start_month,
            start_year=start_year,
            end_month=end_month,
            end_year=end_year,
            is_recurring=is_recurring,
            prep_start_date=prep_start_date,
            prep_months_needed=prep_months_needed
        )

    def _to_text(self, value: Any, field_name: str, record_id: Any) -> str:
        if value is None:
            return ''
        if not isinstance(value, str):
            raise InvalidEventError(
                f"{field_name} must be text, got {type(value).__name__}",
                record_id
            )
        return value

    def _to_tags(self, value: Any, record_id: Any) -> Tuple[str, ...]:
        if not value:
            return ()
        if isinstance(value, str):
            return (value,)
        if not isinstance(value, (list, tuple)) or not all(
            isinstance(tag, str) for tag in value
        ):
            raise InvalidEventError(
                f"tags must be a list of strings, got {value!r}", record_id
            )
        return tuple(value)

    @staticmethod
    def _first_present(record: Dict[str, Any], *keys: str) -> Any:
        for key in keys:
            if record.get(key) is not None:
                return record[key]
        return None

    def _to_int(self, value: Any, field_name: str, record_id: Any) -> int:
        if value is None:
            raise InvalidEventError(
                f"Missing required field: {field_name}", record_id
            )
        if isinstance(value, bool):
            raise InvalidEventError(
                f"Invalid {field_name}: {value!r}", record_id
            )
        try:
            return int(value)
        except (TypeError, ValueError):
            raise InvalidEventError(
                f"Invalid {field_name}: {value!r}", record_id
            )

    def _to_month(self, value: Any, field_name: str, record_id: Any) -> int:
        month = self._to_int(value, field_name, record_id)
        if not 1 <= month <= 12:
            raise InvalidEventError(
                f"{field_name} out of range 1-12: {month}", record_id
            )
        return month

    def _to_year(self, value: Any, field_name: str, record_id: Any) -> int:
        year = self._to_int(value, field_name, record_id)
        if year < 1:
            raise InvalidEventError(
                f"{field_name} must be a positive year: {year}", record_id
            )
        return year

    def _normalize_date(self, value: Any) -> Optional[date]:
        """
        Parse a prep start date.

        Args:
            value: ``date``/``datetime`` or a string in one of DATE_FORMATS

        Returns:
            date object or None if parsing fails
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            return None

        date_str = value.strip()
        # Drop fractional seconds and UTC offsets from ISO timestamps
        if 'T' in date_str:
            date_str = date_str[:19]

        for fmt in self.DATE_FORMATS:
            try:
                return datetime.strptime(date_str, fmt).date()
            except ValueError:
                continue

        return None

    def generate_event_id(self, title: str, start: str, end: str) -> str:
        """
        Generate an identifier for a record that has none.

        Args:
            title: Event title
            start: Start month as YYYY-MM
            end: End month marker

        Returns:
            Event ID (SHA256 hex digest of title + start + end)
        """
        composite = f"{title}|{start}|{end}"
        return hashlib.sha256(composite.encode('utf-8')).hexdigest()
