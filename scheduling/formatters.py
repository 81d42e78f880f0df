"""Display strings for planner events."""
from typing import Optional, Tuple

from processor.models import Event

MONTH_NAMES = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December'
]

MONTH_NAMES_SHORT = [
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec'
]

RANGE_SEPARATOR = ' – '


def get_month_name(month: int) -> str:
    """Full month name for 1-12, empty string otherwise."""
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return ''


def get_short_month_name(month: int) -> str:
    if 1 <= month <= 12:
        return MONTH_NAMES_SHORT[month - 1]
    return ''


def _display_years(event: Event, viewing_year: Optional[int]) -> Tuple[int, int]:
    """
    Start and end year to show for an event.

    Recurring events are shown in the year of the occurrence being viewed;
    a wrapping pattern ends in the following year.
    """
    if event.is_recurring and viewing_year is not None:
        return viewing_year, viewing_year + (1 if event.wraps_year else 0)
    return event.start_year, event.resolved_end_year


def _format_span(event: Event, viewing_year: Optional[int]) -> str:
    start_name = get_month_name(event.start_month)
    end_name = get_month_name(event.end_month)
    start_year, end_year = _display_years(event, viewing_year)

    if start_year == end_year:
        return f"{start_name}{RANGE_SEPARATOR}{end_name} {end_year}"
    return (
        f"{start_name} {start_year}{RANGE_SEPARATOR}"
        f"{end_name} {end_year}"
    )


def format_event_date_range(event: Event, viewing_year: Optional[int] = None) -> str:
    """
    Format the months an event covers.

    Examples:
        ``March 2024``, ``March – May 2024``,
        ``November 2024 – February 2025``

    Args:
        event: Event to format
        viewing_year: Start year of the recurring occurrence on screen;
            ignored for one-off events
    """
    if event.is_multi_month:
        return _format_span(event, viewing_year)
    start_year, _ = _display_years(event, viewing_year)
    return f"{get_month_name(event.start_month)} {start_year}"


def format_this_month_label(
    event: Event,
    viewing_year: Optional[int] = None
) -> Optional[str]:
    """
    Date label for an event listed under the month it occurs in.

    Single-month events get no label since the month is already the
    column heading.
    """
    if event.is_multi_month:
        return _format_span(event, viewing_year)
    return None


def format_prep_badge(event: Event) -> str:
    """
    Short preparation summary for the prep pill.

    Returns:
        ``Mar 15, 2024`` for an explicit prep start date, ``2mo`` for a
        lead time in months, empty string when no preparation is modeled
    """
    if event.prep_start_date is not None:
        prep = event.prep_start_date
        return f"{get_short_month_name(prep.month)} {prep.day}, {prep.year}"
    if event.prep_months_needed and event.prep_months_needed > 0:
        return f"{event.prep_months_needed}mo"
    return ''
