"""Exceptions raised by the clinic event planner."""


class PlannerError(Exception):
    """Base exception for the planner."""


class InvalidEventError(PlannerError):
    """Raised when an event record cannot be normalized."""

    def __init__(self, message: str, record_id: object = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class InvalidRequestError(PlannerError):
    """Raised when a planner view request is malformed."""
