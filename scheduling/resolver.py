"""
Calendar event resolver.

Decides whether an event occurs within a month window and whether a month
falls inside the event's preparation lead time. Months are compared as
ordinals (``year * 12 + month - 1``). Inputs are not validated; callers pass
months in 1-12 and windows whose end is not before their start.
"""
from typing import Iterable, List, Optional, Tuple

from processor.models import Event
from scheduling.periods import month_index

START_PREP_LABEL = 'Start Prep'
PREP_LABEL = 'Prep'


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Closed interval overlap test."""
    return a_start <= b_end and b_start <= a_end


def is_event_in_range(
    event: Event,
    start_month: int,
    start_year: int,
    end_month: int,
    end_year: int
) -> bool:
    """
    Check whether an event occurs within an inclusive month window.

    Args:
        event: Event to test
        start_month: First month of the window (1-12)
        start_year: Year of the first month
        end_month: Last month of the window (1-12)
        end_year: Year of the last month

    Returns:
        True if any occurrence of the event touches the window
    """
    range_start = month_index(start_month, start_year)
    range_end = month_index(end_month, end_year)

    if event.is_recurring:
        # Occurrences before the event's first year never count
        years = range(max(start_year, event.start_year), end_year + 1)

        if not event.is_multi_month:
            return any(
                range_start <= month_index(event.start_month, y) <= range_end
                for y in years
            )

        if event.wraps_year:
            # Known limitation: three sentinel months per year rather than
            # a true interval test, so a window holding only the January
            # part of an occurrence that started the previous year is missed.
            for y in years:
                sentinels = (
                    month_index(event.start_month, y),
                    month_index(12, y),
                    month_index(event.end_month, y + 1),
                )
                if any(range_start <= s <= range_end for s in sentinels):
                    return True
            return False

        return any(
            _overlaps(
                month_index(event.start_month, y),
                month_index(event.end_month, y),
                range_start,
                range_end
            )
            for y in years
        )

    if event.is_multi_month:
        return _overlaps(event.start_index, event.end_index, range_start, range_end)

    return range_start <= event.start_index <= range_end


def _occurrence_for(event: Event, check: int) -> Tuple[int, int]:
    """
    Pick the occurrence a checked month is measured against.

    Non-recurring events have a single occurrence. Recurring events use the
    nearest annual occurrence that has not ended before the checked month,
    never one before the event's first year.
    """
    if not event.is_recurring:
        return event.start_index, event.end_index

    # An occurrence ends at the latest in the year after it starts
    year = max(event.start_year, check // 12 - 1)
    while True:
        start = month_index(event.start_month, year)
        if event.is_multi_month:
            end = month_index(event.end_month, year + (1 if event.wraps_year else 0))
        else:
            end = start
        if end >= check:
            return start, end
        year += 1


def _prep_start_for(event: Event, occurrence_start: int) -> Optional[int]:
    """Month in which preparation for an occurrence begins, if modeled."""
    if event.prep_start_date is not None:
        shift = occurrence_start // 12 - event.start_year
        prep = event.prep_start_date
        return month_index(prep.month, prep.year + shift)
    if event.prep_months_needed and event.prep_months_needed > 0:
        return occurrence_start - event.prep_months_needed
    return None


def is_event_occurring_in_month(event: Event, month: int, year: int) -> bool:
    """
    Check whether a month lies within an occurrence of the event.

    Unlike a one-month ``is_event_in_range`` window, this uses the full span
    of each occurrence, so the January of a November-February recurring
    event counts.
    """
    check = month_index(month, year)
    occurrence_start, occurrence_end = _occurrence_for(event, check)
    return occurrence_start <= check <= occurrence_end


def occurrence_year(event: Event, month: int, year: int) -> int:
    """
    Start year of the occurrence a month is measured against.

    Recurring events report the occurrence containing the month or, if none
    does, the next one; non-recurring events their own start year.
    """
    occurrence_start, _ = _occurrence_for(event, month_index(month, year))
    return occurrence_start // 12


def is_in_prep_window(event: Event, check_month: int, check_year: int) -> bool:
    """
    Check whether a month falls inside an event's preparation window.

    An explicit ``prep_start_date`` takes precedence over
    ``prep_months_needed``. Months in which the event itself occurs are
    never part of the prep window.

    Args:
        event: Event to test
        check_month: Month to check (1-12)
        check_year: Year of the month to check

    Returns:
        True if preparation is under way in the checked month
    """
    check = month_index(check_month, check_year)
    occurrence_start, occurrence_end = _occurrence_for(event, check)

    if occurrence_start <= check <= occurrence_end:
        return False

    prep_start = _prep_start_for(event, occurrence_start)
    if prep_start is None:
        return False

    return prep_start <= check < occurrence_start


def is_prep_starting_this_month(event: Event, month: int, year: int) -> bool:
    """
    Check whether preparation for the event begins in exactly this month.

    For recurring events with a lead time longer than a year, the month may
    start preparation for a later occurrence than the one being prepared.
    """
    check = month_index(month, year)
    occurrence_start, occurrence_end = _occurrence_for(event, check)
    if occurrence_start <= check <= occurrence_end:
        return False

    while True:
        prep_start = _prep_start_for(event, occurrence_start)
        if prep_start is None or prep_start > check:
            return False
        if prep_start == check:
            return prep_start < occurrence_start
        if not event.is_recurring:
            return False
        occurrence_start += 12


def prep_label(event: Event, month: int, year: int) -> str:
    """Return the prep pill label for a month: emphasized on the first month."""
    if is_prep_starting_this_month(event, month, year):
        return START_PREP_LABEL
    return PREP_LABEL


def get_events_for_month_range(
    events: Iterable[Event],
    start_month: int,
    start_year: int,
    end_month: int,
    end_year: int
) -> List[Event]:
    """Events occurring within a month window, in input order."""
    return [
        event for event in events
        if is_event_in_range(event, start_month, start_year, end_month, end_year)
    ]


def get_events_occurring_in_month(
    events: Iterable[Event],
    month: int,
    year: int
) -> List[Event]:
    """Events with an occurrence covering a month, in input order."""
    return [event for event in events if is_event_occurring_in_month(event, month, year)]


def get_prep_events_for_month(
    events: Iterable[Event],
    month: int,
    year: int
) -> List[Event]:
    """Events whose preparation window covers a month, in input order."""
    return [event for event in events if is_in_prep_window(event, month, year)]
