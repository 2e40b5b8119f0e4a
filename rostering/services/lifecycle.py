"""Draft review and publication of monthly schedule batches."""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from rostering.domain.errors import (
    BatchAlreadyPublishedError,
    BatchNotFoundError,
    BatchPublishedError,
    DuplicateBatchError,
    LineItemNotFoundError,
)
from rostering.domain.models import ScheduleBatch, ScheduleLineItem
from rostering.domain.repositories import (
    CapabilityRepository,
    DateRestrictionRepository,
    ScheduleRepository,
    WorkerRepository,
)

from .eligibility import ValidationResult, require_active_worker, validate_assignment


class ScheduleLifecycleManager:
    """
    Moves a batch through ``draft -> published``.

    Structural edits (reassign, delete) are only allowed on drafts; once a
    batch is published its line-items change through substitution requests.
    """

    def __init__(self, session: Session):
        self.session = session

    def create_draft(
        self,
        year: int,
        month: int,
        line_items: Iterable,
        created_by: str | None = None,
    ) -> ScheduleBatch:
        """
        Persist a new draft batch with its line-items in one transaction.

        Args:
            year: Batch year
            month: Batch month
            line_items: Proposed items exposing worker_id, service_type_id,
                service_date, function_label and from_fixed_role
            created_by: Actor identifier for the audit field

        Raises:
            DuplicateBatchError: If any batch already exists for the period
        """
        if ScheduleRepository.get_batches_for_period(self.session, year, month):
            raise DuplicateBatchError(year, month)

        batch = ScheduleBatch(year=year, month=month, status="draft", created_by=created_by)
        rows = [
            ScheduleLineItem(
                worker_id=item.worker_id,
                service_type_id=item.service_type_id,
                service_date=item.service_date,
                function_label=item.function_label,
                from_fixed_role=bool(item.from_fixed_role),
            )
            for item in line_items
        ]
        ScheduleRepository.persist_batch(self.session, batch, rows)
        print(f"[INFO] Created draft batch {batch.id} for {batch.period} with {len(rows)} line-items")
        return batch

    def find_batch(self, year: int, month: int) -> Optional[ScheduleBatch]:
        """Most recent batch for the period, or None."""
        batches = ScheduleRepository.get_batches_for_period(self.session, year, month)
        return batches[0] if batches else None

    def get_batch(self, batch_id: int) -> ScheduleBatch:
        batch = ScheduleRepository.get_batch(self.session, batch_id)
        if batch is None:
            raise BatchNotFoundError(batch_id)
        return batch

    def list_line_items(self, batch_id: int) -> List[ScheduleLineItem]:
        return ScheduleRepository.get_line_items(self.session, batch_id)

    def _editable_line_item(self, line_item_id: int) -> ScheduleLineItem:
        item = ScheduleRepository.get_line_item(self.session, line_item_id)
        if item is None:
            raise LineItemNotFoundError(line_item_id)
        if item.batch.is_published:
            raise BatchPublishedError(item.batch_id)
        return item

    def reassign_line_item(self, line_item_id: int, new_worker_id: int) -> ValidationResult:
        """
        Move a draft line-item to another worker.

        The new worker must exist and be active, and is validated against
        every other item of the batch. On failure nothing is changed and the
        reasons are returned.

        Raises:
            LineItemNotFoundError: If the line-item does not exist
            BatchPublishedError: If its batch is already published
        """
        item = self._editable_line_item(line_item_id)
        others = [i for i in self.list_line_items(item.batch_id) if i.id != item.id]
        result = validate_assignment(
            new_worker_id,
            item.service_type,
            item.service_date,
            others,
            CapabilityRepository.get_all(self.session),
            DateRestrictionRepository.get_all(self.session),
        )
        result = require_active_worker(
            result, new_worker_id, WorkerRepository.get_by_id(self.session, new_worker_id)
        )
        if not result.valid:
            return result

        ScheduleRepository.update_line_item_worker(self.session, item.id, new_worker_id)
        print(f"[INFO] Line-item {item.id} reassigned to worker {new_worker_id}")
        return result

    def delete_line_item(self, line_item_id: int) -> None:
        """
        Remove a line-item from a draft.

        Raises:
            LineItemNotFoundError: If the line-item does not exist
            BatchPublishedError: If its batch is already published
        """
        item = self._editable_line_item(line_item_id)
        ScheduleRepository.delete_line_item(self.session, item.id)
        print(f"[INFO] Line-item {line_item_id} removed")

    def publish(self, batch_id: int) -> ScheduleBatch:
        """
        Transition a draft to published. No re-validation is run.

        Raises:
            BatchNotFoundError: If the batch does not exist
            BatchAlreadyPublishedError: If it is already published
        """
        batch = self.get_batch(batch_id)
        if batch.is_published:
            raise BatchAlreadyPublishedError(batch_id)
        ScheduleRepository.set_batch_status(self.session, batch_id, "published")
        print(f"[OK] Batch {batch_id} ({batch.period}) published")
        return batch
