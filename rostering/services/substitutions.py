"""Substitution requests against published schedule line-items."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from rostering.domain.errors import (
    AssignmentValidationError,
    BatchNotPublishedError,
    LineItemNotFoundError,
    MissingReasonError,
    RequestAlreadyResolvedError,
    RequestNotFoundError,
)
from rostering.domain.models import ScheduleLineItem, SubstitutionRequest
from rostering.domain.repositories import (
    CapabilityRepository,
    DateRestrictionRepository,
    ScheduleRepository,
    SubstitutionRepository,
    WorkerRepository,
)

from .eligibility import ValidationResult, require_active_worker, validate_assignment


class SubstitutionWorkflow:
    """
    Request, approve and reject worker substitutions.

    Each request moves ``pending -> approved | rejected`` exactly once.
    Approving a request that names a replacement rewrites the line-item in
    the same commit as the status change.
    """

    def __init__(self, session: Session):
        self.session = session

    def _line_item(self, line_item_id: int) -> ScheduleLineItem:
        item = ScheduleRepository.get_line_item(self.session, line_item_id)
        if item is None:
            raise LineItemNotFoundError(line_item_id)
        return item

    def _pending_request(self, request_id: int) -> SubstitutionRequest:
        request = SubstitutionRepository.get_by_id(self.session, request_id)
        if request is None:
            raise RequestNotFoundError(request_id)
        if not request.is_pending:
            raise RequestAlreadyResolvedError(request_id, request.status)
        return request

    def validate_replacement(self, item: ScheduleLineItem, worker_id: int) -> ValidationResult:
        """Check a replacement against the rest of the item's batch."""
        others = [
            i for i in ScheduleRepository.get_line_items(self.session, item.batch_id) if i.id != item.id
        ]
        result = validate_assignment(
            worker_id,
            item.service_type,
            item.service_date,
            others,
            CapabilityRepository.get_all(self.session),
            DateRestrictionRepository.get_all(self.session),
        )
        return require_active_worker(result, worker_id, WorkerRepository.get_by_id(self.session, worker_id))

    def request_substitution(
        self,
        line_item_id: int,
        requested_by: str,
        reason: str,
        proposed_worker_id: Optional[int] = None,
    ) -> SubstitutionRequest:
        """
        Open a pending substitution request for a published line-item.

        Raises:
            MissingReasonError: If the reason is empty or blank
            LineItemNotFoundError: If the line-item does not exist
            BatchNotPublishedError: If the line-item's batch is still a draft
            AssignmentValidationError: If the proposed worker is not eligible;
                no request is created
        """
        if not reason or not reason.strip():
            raise MissingReasonError()

        item = self._line_item(line_item_id)
        if not item.batch.is_published:
            raise BatchNotPublishedError(item.batch_id)

        if proposed_worker_id is not None:
            result = self.validate_replacement(item, proposed_worker_id)
            if not result.valid:
                raise AssignmentValidationError(result.errors)

        request = SubstitutionRequest(
            line_item_id=item.id,
            requested_by=requested_by,
            reason=reason.strip(),
            proposed_worker_id=proposed_worker_id,
            status="pending",
        )
        SubstitutionRepository.persist(self.session, request)
        print(f"[INFO] Substitution request {request.id} opened for line-item {item.id}")
        return request

    def approve(self, request_id: int, approved_by: str) -> SubstitutionRequest:
        """
        Approve a pending request.

        A proposed replacement is re-validated against the current batch and
        written to the line-item together with the decision. Without a
        replacement only the decision is recorded.

        Raises:
            RequestNotFoundError: If the request does not exist
            RequestAlreadyResolvedError: If it was already approved or rejected
            AssignmentValidationError: If the replacement is no longer eligible;
                the request stays pending
        """
        request = self._pending_request(request_id)

        if request.proposed_worker_id is not None:
            item = self._line_item(request.line_item_id)
            result = self.validate_replacement(item, request.proposed_worker_id)
            if not result.valid:
                raise AssignmentValidationError(result.errors)

        try:
            if request.proposed_worker_id is not None:
                ScheduleRepository.update_line_item_worker(
                    self.session, request.line_item_id, request.proposed_worker_id, commit=False
                )
            SubstitutionRepository.update_status(
                self.session, request.id, "approved", approved_by, commit=False
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            print(f"[ERROR] Approval of substitution request {request_id} rolled back")
            raise

        print(f"[OK] Substitution request {request_id} approved by {approved_by}")
        return request

    def reject(self, request_id: int, approved_by: str) -> SubstitutionRequest:
        """
        Reject a pending request. The line-item is left untouched.

        Raises:
            RequestNotFoundError: If the request does not exist
            RequestAlreadyResolvedError: If it was already approved or rejected
        """
        request = self._pending_request(request_id)
        SubstitutionRepository.update_status(self.session, request.id, "rejected", approved_by)
        print(f"[INFO] Substitution request {request_id} rejected by {approved_by}")
        return request

    def list_requests(self, status: str | None = None) -> List[SubstitutionRequest]:
        return SubstitutionRepository.list(self.session, status)
