"""Repository classes for data access."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from .models import (
    Capability,
    DateRestriction,
    FixedRole,
    ScheduleBatch,
    ScheduleLineItem,
    ServiceType,
    SubstitutionRequest,
    Worker,
)


class WorkerRepository:
    """Repository for roster data access."""

    @staticmethod
    def get_all(session: Session) -> List[Worker]:
        """Get all workers."""
        return session.query(Worker).order_by(Worker.id).all()

    @staticmethod
    def list_active(session: Session) -> List[Worker]:
        """Get workers that take part in allocation, ordered by id."""
        return session.query(Worker).filter(Worker.status == "active").order_by(Worker.id).all()

    @staticmethod
    def get_by_id(session: Session, worker_id: int) -> Optional[Worker]:
        """Get worker by ID."""
        return session.query(Worker).filter(Worker.id == worker_id).first()

    @staticmethod
    def create(session: Session, worker: Worker) -> Worker:
        """Create a new worker."""
        session.add(worker)
        session.commit()
        session.refresh(worker)
        return worker

    @staticmethod
    def bulk_create(session: Session, workers: List[Worker]) -> None:
        """Create multiple workers."""
        session.add_all(workers)
        session.commit()


class ServiceTypeRepository:
    """Repository for service-type definitions."""

    @staticmethod
    def list(session: Session, active_only: bool = True) -> List[ServiceType]:
        """Get service types ordered by name."""
        query = session.query(ServiceType)
        if active_only:
            query = query.filter(ServiceType.active.is_(True))
        return query.order_by(ServiceType.name, ServiceType.id).all()

    @staticmethod
    def get_by_id(session: Session, service_type_id: int) -> Optional[ServiceType]:
        """Get service type by ID."""
        return session.query(ServiceType).filter(ServiceType.id == service_type_id).first()

    @staticmethod
    def create(session: Session, service_type: ServiceType) -> ServiceType:
        """Create a new service type."""
        session.add(service_type)
        session.commit()
        session.refresh(service_type)
        return service_type

    @staticmethod
    def bulk_create(session: Session, service_types: List[ServiceType]) -> None:
        """Create multiple service types."""
        session.add_all(service_types)
        session.commit()


class CapabilityRepository:
    """Repository for capability grants."""

    @staticmethod
    def get_all(session: Session) -> List[Capability]:
        """Get all capability rows (active and inactive)."""
        return session.query(Capability).order_by(Capability.id).all()

    @staticmethod
    def bulk_create(session: Session, capabilities: List[Capability]) -> None:
        """Create multiple capability rows."""
        session.add_all(capabilities)
        session.commit()


class FixedRoleRepository:
    """Repository for fixed-role pins."""

    @staticmethod
    def get_all(session: Session) -> List[FixedRole]:
        """Get all fixed roles, oldest first."""
        return session.query(FixedRole).order_by(FixedRole.created_at, FixedRole.id).all()

    @staticmethod
    def bulk_create(session: Session, fixed_roles: List[FixedRole]) -> None:
        """Create multiple fixed roles."""
        session.add_all(fixed_roles)
        session.commit()


class DateRestrictionRepository:
    """Repository for day-level unavailability."""

    @staticmethod
    def get_all(session: Session) -> List[DateRestriction]:
        """Get all date restrictions."""
        return session.query(DateRestriction).order_by(DateRestriction.restriction_date).all()

    @staticmethod
    def get_by_worker(session: Session, worker_id: int) -> List[DateRestriction]:
        """Get restrictions for a specific worker."""
        return (
            session.query(DateRestriction)
            .filter(DateRestriction.worker_id == worker_id)
            .order_by(DateRestriction.restriction_date)
            .all()
        )

    @staticmethod
    def bulk_create(session: Session, restrictions: List[DateRestriction]) -> None:
        """Create multiple restrictions."""
        session.add_all(restrictions)
        session.commit()


class ScheduleRepository:
    """Repository for schedule batches and their line-items."""

    @staticmethod
    def get_batch(session: Session, batch_id: int) -> Optional[ScheduleBatch]:
        """Get batch by ID."""
        return session.query(ScheduleBatch).filter(ScheduleBatch.id == batch_id).first()

    @staticmethod
    def get_batches_for_period(session: Session, year: int, month: int) -> List[ScheduleBatch]:
        """Get every batch for a period, newest first."""
        return (
            session.query(ScheduleBatch)
            .filter(ScheduleBatch.year == year, ScheduleBatch.month == month)
            .order_by(ScheduleBatch.created_at.desc(), ScheduleBatch.id.desc())
            .all()
        )

    @staticmethod
    def get_line_item(session: Session, line_item_id: int) -> Optional[ScheduleLineItem]:
        """Get line-item by ID."""
        return session.query(ScheduleLineItem).filter(ScheduleLineItem.id == line_item_id).first()

    @staticmethod
    def get_line_items(session: Session, batch_id: int) -> List[ScheduleLineItem]:
        """Get all line-items of a batch ordered by date, then service-type name."""
        return (
            session.query(ScheduleLineItem)
            .join(ServiceType)
            .filter(ScheduleLineItem.batch_id == batch_id)
            .order_by(ScheduleLineItem.service_date, ServiceType.name, ScheduleLineItem.id)
            .all()
        )

    @staticmethod
    def persist_batch(
        session: Session,
        batch: ScheduleBatch,
        line_items: Sequence[ScheduleLineItem],
    ) -> int:
        """
        Insert a batch and its line-items in a single transaction.

        Returns:
            The new batch id

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the write fails (nothing is kept)
        """
        try:
            session.add(batch)
            session.flush()
            for item in line_items:
                item.batch_id = batch.id
            session.add_all(line_items)
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(batch)
        return batch.id

    @staticmethod
    def update_line_item_worker(
        session: Session,
        line_item_id: int,
        worker_id: int,
        commit: bool = True,
    ) -> ScheduleLineItem:
        """Point a line-item at a different worker."""
        item = ScheduleRepository.get_line_item(session, line_item_id)
        if item is None:
            raise LookupError(f"Line-item {line_item_id} not found")
        item.worker_id = worker_id
        session.flush()
        session.expire(item, ["worker"])
        if commit:
            session.commit()
        return item

    @staticmethod
    def delete_line_item(session: Session, line_item_id: int) -> bool:
        """Delete a line-item. Returns False if it did not exist."""
        item = ScheduleRepository.get_line_item(session, line_item_id)
        if item is None:
            return False
        session.delete(item)
        session.commit()
        return True

    @staticmethod
    def set_batch_status(session: Session, batch_id: int, status: str) -> ScheduleBatch:
        """Change a batch status; stamps ``published_at`` on publication."""
        batch = ScheduleRepository.get_batch(session, batch_id)
        if batch is None:
            raise LookupError(f"Schedule batch {batch_id} not found")
        batch.status = status
        if status == "published":
            batch.published_at = datetime.utcnow()
        session.commit()
        return batch


class SubstitutionRepository:
    """Repository for substitution requests."""

    @staticmethod
    def get_by_id(session: Session, request_id: int) -> Optional[SubstitutionRequest]:
        """Get request by ID."""
        return session.query(SubstitutionRequest).filter(SubstitutionRequest.id == request_id).first()

    @staticmethod
    def list(session: Session, status: str | None = None) -> List[SubstitutionRequest]:
        """Get requests newest first, optionally filtered by status."""
        query = session.query(SubstitutionRequest)
        if status:
            query = query.filter(SubstitutionRequest.status == status)
        return query.order_by(SubstitutionRequest.created_at.desc(), SubstitutionRequest.id.desc()).all()

    @staticmethod
    def persist(session: Session, request: SubstitutionRequest) -> int:
        """Insert a new request. Returns its id."""
        session.add(request)
        session.commit()
        session.refresh(request)
        return request.id

    @staticmethod
    def update_status(
        session: Session,
        request_id: int,
        status: str,
        approved_by: str,
        commit: bool = True,
    ) -> SubstitutionRequest:
        """Record a decision on a request."""
        request = SubstitutionRepository.get_by_id(session, request_id)
        if request is None:
            raise LookupError(f"Substitution request {request_id} not found")
        request.status = status
        request.approved_by = approved_by
        request.decided_at = datetime.utcnow()
        if commit:
            session.commit()
        return request
