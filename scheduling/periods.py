"""Month, quarter and year arithmetic for the planner screens."""
from typing import List, Tuple

MONTHS_PER_QUARTER = 3

MonthRange = Tuple[int, int, int, int]


def month_index(month: int, year: int) -> int:
    """Comparable ordinal of a (month, year) pair: months since year 0."""
    return year * 12 + (month - 1)


def from_month_index(index: int) -> Tuple[int, int]:
    """Inverse of month_index, returning (month, year)."""
    return index % 12 + 1, index // 12


def add_months(month: int, year: int, delta: int) -> Tuple[int, int]:
    """
    Shift a (month, year) pair by a number of months.

    Args:
        month: Month number (1-12)
        year: Calendar year
        delta: Months to add; negative values move backwards

    Returns:
        Tuple of (month, year) after carrying or borrowing across years
    """
    return from_month_index(month_index(month, year) + delta)


def quarter_for_month(month: int) -> int:
    """Return the quarter (1-4) containing a month."""
    return (month - 1) // MONTHS_PER_QUARTER + 1


def quarter_months(quarter: int) -> List[int]:
    """Return the three month numbers of a quarter."""
    first = (quarter - 1) * MONTHS_PER_QUARTER + 1
    return list(range(first, first + MONTHS_PER_QUARTER))


def upcoming_range(month: int, year: int, months_ahead: int = 3) -> MonthRange:
    """
    Window of the months following the selected one.

    The month screen lists events of the next ``months_ahead`` months, not
    including the selected month itself.

    Args:
        month: Selected month (1-12)
        year: Selected year
        months_ahead: Width of the window in months

    Returns:
        Tuple of (start_month, start_year, end_month, end_year)
    """
    start_month, start_year = add_months(month, year, 1)
    end_month, end_year = add_months(month, year, months_ahead)
    return start_month, start_year, end_month, end_year


def next_quarter(quarter: int, year: int) -> Tuple[int, int]:
    if quarter == 4:
        return 1, year + 1
    return quarter + 1, year


def previous_quarter(quarter: int, year: int) -> Tuple[int, int]:
    if quarter == 1:
        return 4, year - 1
    return quarter - 1, year
