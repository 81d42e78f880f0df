"""Month, quarter and year planner views built from resolved events."""
import logging
from typing import List, Sequence

from processor.models import Event, MonthView, PlannerCard, QuarterView, YearView
from scheduling.formatters import (
    format_event_date_range,
    format_prep_badge,
    format_this_month_label,
    get_month_name,
)
from scheduling.periods import quarter_months, upcoming_range
from scheduling.resolver import (
    get_events_for_month_range,
    get_events_occurring_in_month,
    get_prep_events_for_month,
    occurrence_year,
    prep_label,
)

logger = logging.getLogger(__name__)


def _occurring_cards(events: Sequence[Event], month: int, year: int) -> List[PlannerCard]:
    return [
        PlannerCard(
            event=event,
            date_label=format_this_month_label(
                event, occurrence_year(event, month, year)
            ),
            prep_badge=format_prep_badge(event)
        )
        for event in events
    ]


def _prep_cards(events: Sequence[Event], month: int, year: int) -> List[PlannerCard]:
    return [
        PlannerCard(
            event=event,
            date_label=format_event_date_range(
                event, occurrence_year(event, month, year)
            ),
            prep_badge=format_prep_badge(event),
            prep_label=prep_label(event, month, year)
        )
        for event in get_prep_events_for_month(events, month, year)
    ]


def build_month_view(
    events: Sequence[Event],
    month: int,
    year: int,
    upcoming_months: int = 3
) -> MonthView:
    """
    Build the month screen: this month, prep and upcoming columns.

    Args:
        events: Normalized events
        month: Selected month (1-12)
        year: Selected year
        upcoming_months: Number of months after the selected one to list
            under upcoming; 0 leaves the column empty

    Returns:
        MonthView with display-ready cards
    """
    occurring = get_events_for_month_range(events, month, year, month, year)
    view = MonthView(
        month=month,
        year=year,
        title=f"{get_month_name(month)} {year}",
        this_month=_occurring_cards(occurring, month, year),
        prep=_prep_cards(events, month, year)
    )

    if upcoming_months > 0:
        start_month, start_year, end_month, end_year = upcoming_range(
            month, year, upcoming_months
        )
        view.upcoming = [
            PlannerCard(
                event=event,
                date_label=format_event_date_range(
                    event, occurrence_year(event, start_month, start_year)
                ),
                prep_badge=format_prep_badge(event)
            )
            for event in get_events_for_month_range(
                events, start_month, start_year, end_month, end_year
            )
        ]

    logger.debug(
        f"Month view {view.title}: {len(view.this_month)} occurring, "
        f"{len(view.prep)} in prep, {len(view.upcoming)} upcoming"
    )
    return view


def build_quarter_view(events: Sequence[Event], quarter: int, year: int) -> QuarterView:
    """Build the quarter screen: one month container per month, no upcoming column."""
    months = [
        MonthView(
            month=month,
            year=year,
            title=get_month_name(month),
            this_month=_occurring_cards(
                get_events_occurring_in_month(events, month, year), month, year
            ),
            prep=_prep_cards(events, month, year)
        )
        for month in quarter_months(quarter)
    ]
    return QuarterView(
        quarter=quarter,
        year=year,
        title=f"Q{quarter} {year}",
        months=months
    )


def build_year_view(events: Sequence[Event], year: int) -> YearView:
    """Build the annual planner: occurring events for each month."""
    months = [
        MonthView(
            month=month,
            year=year,
            title=get_month_name(month),
            this_month=_occurring_cards(
                get_events_occurring_in_month(events, month, year), month, year
            )
        )
        for month in range(1, 13)
    ]
    logger.debug(
        f"Year view {year}: "
        f"{sum(len(m.this_month) for m in months)} month entries"
    )
    return YearView(year=year, title=str(year), months=months)
