"""SQLAlchemy models for the monthly rostering system."""

from __future__ import annotations

from datetime import datetime
from typing import FrozenSet, Iterable

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship


WORKER_STATUSES = ("active", "inactive", "on_leave")
BATCH_STATUSES = ("draft", "published")
REQUEST_STATUSES = ("pending", "approved", "rejected")


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Worker(Base):
    """Roster member that can be assigned to service slots."""

    __tablename__ = "workers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    status = Column(String(20), nullable=False, default="active")  # active, inactive, on_leave

    capabilities = relationship("Capability", back_populates="worker")
    fixed_roles = relationship("FixedRole", back_populates="worker")
    restrictions = relationship("DateRestriction", back_populates="worker")

    def __init__(self, **kwargs):
        kwargs.setdefault("status", "active")
        super().__init__(**kwargs)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def __repr__(self) -> str:
        return f"<Worker(id={self.id}, name='{self.name}', status='{self.status}')>"


class ServiceType(Base):
    """Recurring service offered on fixed weekdays within a wall-clock window."""

    __tablename__ = "service_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    # Stored for the roster screens; allocation assigns one worker per slot.
    headcount = Column(Integer, nullable=False, default=1)
    start_time = Column(String(8), nullable=False)  # HH:MM
    end_time = Column(String(8), nullable=False)  # HH:MM
    weekdays = Column(String(100), nullable=False, default="")  # e.g. "monday,friday"
    active = Column(Boolean, nullable=False, default=True)

    def __init__(self, **kwargs):
        kwargs.setdefault("active", True)
        kwargs.setdefault("headcount", 1)
        weekday_set = kwargs.pop("weekday_set", None)
        super().__init__(**kwargs)
        if weekday_set is not None:
            self.weekday_set = weekday_set
        elif self.weekdays is None:
            self.weekdays = ""

    @property
    def weekday_set(self) -> FrozenSet[str]:
        return frozenset(d.strip().lower() for d in (self.weekdays or "").split(",") if d.strip())

    @weekday_set.setter
    def weekday_set(self, days: Iterable[str]) -> None:
        self.weekdays = ",".join(sorted({d.strip().lower() for d in days if d.strip()}))

    def runs_on(self, weekday: str) -> bool:
        """True if the service runs on the weekday; an empty set means every scheduled day."""
        days = self.weekday_set
        return not days or weekday.lower() in days

    def __repr__(self) -> str:
        return f"<ServiceType(id={self.id}, name='{self.name}', {self.start_time}-{self.end_time}, days='{self.weekdays}')>"


class Capability(Base):
    """Grant allowing a worker to be auto-assigned to a service type."""

    __tablename__ = "capabilities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False)
    service_type_id = Column(Integer, ForeignKey("service_types.id"), nullable=False)
    experience_level = Column(String(20), nullable=False, default="beginner")
    priority = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)

    worker = relationship("Worker", back_populates="capabilities")
    service_type = relationship("ServiceType")

    def __init__(self, **kwargs):
        kwargs.setdefault("active", True)
        kwargs.setdefault("experience_level", "beginner")
        kwargs.setdefault("priority", 0)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<Capability(worker={self.worker_id}, service_type={self.service_type_id}, active={self.active})>"


class FixedRole(Base):
    """Standing pin of one worker to every occurrence of a service type."""

    __tablename__ = "fixed_roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False)
    service_type_id = Column(Integer, ForeignKey("service_types.id"), nullable=False)
    function_label = Column(String(100), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    worker = relationship("Worker", back_populates="fixed_roles")
    service_type = relationship("ServiceType")

    def __init__(self, **kwargs):
        kwargs.setdefault("active", True)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<FixedRole(id={self.id}, worker={self.worker_id}, service_type={self.service_type_id})>"


class DateRestriction(Base):
    """Whole-day unavailability of a worker."""

    __tablename__ = "date_restrictions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False)
    restriction_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    worker = relationship("Worker", back_populates="restrictions")

    def __init__(self, **kwargs):
        kwargs.setdefault("active", True)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<DateRestriction(worker={self.worker_id}, date={self.restriction_date})>"


class ScheduleBatch(Base):
    """One month's generated schedule."""

    __tablename__ = "schedule_batches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="draft")  # draft, published
    created_by = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    published_at = Column(DateTime, nullable=True)

    line_items = relationship(
        "ScheduleLineItem",
        back_populates="batch",
        cascade="all, delete-orphan",
        order_by="ScheduleLineItem.service_date",
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("status", "draft")
        super().__init__(**kwargs)

    @property
    def is_published(self) -> bool:
        return self.status == "published"

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def __repr__(self) -> str:
        return f"<ScheduleBatch(id={self.id}, period={self.period}, status='{self.status}')>"


class ScheduleLineItem(Base):
    """Concrete (worker, service type, date) assignment within a batch."""

    __tablename__ = "schedule_line_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    batch_id = Column(Integer, ForeignKey("schedule_batches.id"), nullable=False)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False)
    service_type_id = Column(Integer, ForeignKey("service_types.id"), nullable=False)
    service_date = Column(Date, nullable=False)
    function_label = Column(String(100), nullable=True)
    from_fixed_role = Column(Boolean, nullable=False, default=False)

    batch = relationship("ScheduleBatch", back_populates="line_items")
    worker = relationship("Worker")
    service_type = relationship("ServiceType")
    substitution_requests = relationship("SubstitutionRequest", back_populates="line_item")

    def __init__(self, **kwargs):
        kwargs.setdefault("from_fixed_role", False)
        super().__init__(**kwargs)

    # Window accessors shared with engine-proposed items for conflict detection.
    @property
    def start_time(self) -> str | None:
        return self.service_type.start_time if self.service_type else None

    @property
    def end_time(self) -> str | None:
        return self.service_type.end_time if self.service_type else None

    @property
    def service_type_name(self) -> str | None:
        return self.service_type.name if self.service_type else None

    @property
    def worker_name(self) -> str | None:
        return self.worker.name if self.worker else None

    def __repr__(self) -> str:
        return (
            f"<ScheduleLineItem(id={self.id}, batch={self.batch_id}, worker={self.worker_id}, "
            f"service_type={self.service_type_id}, date={self.service_date})>"
        )


class SubstitutionRequest(Base):
    """Post-publication request to replace the worker on a line-item."""

    __tablename__ = "substitution_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    line_item_id = Column(Integer, ForeignKey("schedule_line_items.id"), nullable=False)
    requested_by = Column(String(100), nullable=False)
    reason = Column(Text, nullable=False)
    proposed_worker_id = Column(Integer, ForeignKey("workers.id"), nullable=True)
    status = Column(String(20), nullable=False, default="pending")  # pending, approved, rejected
    approved_by = Column(String(100), nullable=True)
    decided_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    line_item = relationship("ScheduleLineItem", back_populates="substitution_requests")
    proposed_worker = relationship("Worker")

    def __init__(self, **kwargs):
        kwargs.setdefault("status", "pending")
        super().__init__(**kwargs)

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    def __repr__(self) -> str:
        return (
            f"<SubstitutionRequest(id={self.id}, line_item={self.line_item_id}, "
            f"proposed={self.proposed_worker_id}, status='{self.status}')>"
        )


__all__ = [
    "Base",
    "Worker",
    "ServiceType",
    "Capability",
    "FixedRole",
    "DateRestriction",
    "ScheduleBatch",
    "ScheduleLineItem",
    "SubstitutionRequest",
    "WORKER_STATUSES",
    "BATCH_STATUSES",
    "REQUEST_STATUSES",
]
