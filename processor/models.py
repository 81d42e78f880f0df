"""Data models for planner events and calendar views."""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Event:
    """Normalized planner event consumed by the scheduling resolver."""
    start_month: int
    start_year: int
    title: str = ''
    end_month: Optional[int] = None
    end_year: Optional[int] = None
    is_recurring: bool = False
    prep_start_date: Optional[date] = None
    prep_months_needed: int = 0
    event_id: Optional[str] = None
    description: str = ''
    tags: Tuple[str, ...] = ()

    @property
    def wraps_year(self) -> bool:
        """True when the month pattern crosses December into January."""
        return self.end_month is not None and self.end_month < self.start_month

    @property
    def resolved_end_year(self) -> int:
        """
        Year of the event's last month.

        Recurring events may omit ``end_year``; the year is then derived
        from the month pattern.
        """
        if self.end_year is not None:
            return self.end_year
        if self.wraps_year:
            return self.start_year + 1
        return self.start_year

    @property
    def is_multi_month(self) -> bool:
        """True when the event spans more than its start month."""
        if self.end_month is None:
            return False
        return (
            self.end_month != self.start_month
            or self.resolved_end_year != self.start_year
        )

    @property
    def start_index(self) -> int:
        """Months since year 0 of the first month, for ordering."""
        return self.start_year * 12 + self.start_month - 1

    @property
    def end_index(self) -> int:
        if not self.is_multi_month:
            return self.start_index
        return self.resolved_end_year * 12 + self.end_month - 1


@dataclass
class PlannerCard:
    """Display-ready event entry for one planner column."""
    event: Event
    date_label: Optional[str]
    prep_badge: str
    prep_label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_id': self.event.event_id,
            'title': self.event.title,
            'description': self.event.description,
            'tags': list(self.event.tags),
            'is_recurring': self.event.is_recurring,
            'date_label': self.date_label,
            'prep_badge': self.prep_badge,
            'prep_label': self.prep_label,
        }


@dataclass
class MonthView:
    """Events occurring, in preparation and upcoming for one month."""
    month: int
    year: int
    title: str
    this_month: List[PlannerCard] = field(default_factory=list)
    prep: List[PlannerCard] = field(default_factory=list)
    upcoming: List[PlannerCard] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'month': self.month,
            'year': self.year,
            'title': self.title,
            'this_month': [card.to_dict() for card in self.this_month],
            'prep': [card.to_dict() for card in self.prep],
            'upcoming': [card.to_dict() for card in self.upcoming],
        }


@dataclass
class QuarterView:
    """Three month containers for one quarter."""
    quarter: int
    year: int
    title: str
    months: List[MonthView] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'quarter': self.quarter,
            'year': self.year,
            'title': self.title,
            'months': [month.to_dict() for month in self.months],
        }


@dataclass
class YearView:
    """Occurring events for each month of a year."""
    year: int
    title: str
    months: List[MonthView] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'year': self.year,
            'title': self.title,
            'months': [month.to_dict() for month in self.months],
        }
