"""Named error conditions raised by the lifecycle and substitution services."""

from __future__ import annotations

from typing import List


class SchedulingError(ValueError):
    """Base class for rule violations callers are expected to handle."""


class DuplicateBatchError(SchedulingError):
    def __init__(self, year: int, month: int):
        self.year = year
        self.month = month
        super().__init__(f"A schedule batch already exists for {year:04d}-{month:02d}")


class BatchNotFoundError(SchedulingError):
    def __init__(self, batch_id: int):
        self.batch_id = batch_id
        super().__init__(f"Schedule batch {batch_id} not found")


class BatchPublishedError(SchedulingError):
    """Structural edit attempted on a published batch."""

    def __init__(self, batch_id: int):
        self.batch_id = batch_id
        super().__init__(
            f"Schedule batch {batch_id} is published; use a substitution request to change it"
        )


class BatchAlreadyPublishedError(SchedulingError):
    def __init__(self, batch_id: int):
        self.batch_id = batch_id
        super().__init__(f"Schedule batch {batch_id} is already published")


class BatchNotPublishedError(SchedulingError):
    def __init__(self, batch_id: int):
        self.batch_id = batch_id
        super().__init__(f"Schedule batch {batch_id} is not published; edit the draft directly")


class LineItemNotFoundError(SchedulingError):
    def __init__(self, line_item_id: int):
        self.line_item_id = line_item_id
        super().__init__(f"Schedule line-item {line_item_id} not found")


class RequestNotFoundError(SchedulingError):
    def __init__(self, request_id: int):
        self.request_id = request_id
        super().__init__(f"Substitution request {request_id} not found")


class RequestAlreadyResolvedError(SchedulingError):
    def __init__(self, request_id: int, status: str):
        self.request_id = request_id
        self.status = status
        super().__init__(f"Substitution request {request_id} is already {status}")


class MissingReasonError(SchedulingError):
    def __init__(self):
        super().__init__("A reason is required to request a substitution")


class AssignmentValidationError(SchedulingError):
    """Proposed assignment failed eligibility; ``errors`` lists every reason."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid assignment: " + "; ".join(self.errors))
