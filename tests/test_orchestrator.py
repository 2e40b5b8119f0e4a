"""Tests for month schedule generation against the database."""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from rostering.config import SchedulerConfig
from rostering.domain.errors import DuplicateBatchError
from rostering.domain.models import (
    Base,
    Capability,
    FixedRole,
    ScheduleBatch,
    ScheduleLineItem,
    ServiceType,
    Worker,
)
from rostering.engine.orchestrator import build_month_schedule, load_snapshot


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def roster(db_session):
    """Two services, three active workers and one on leave."""
    db_session.add_all([
        Worker(id=1, name="Ana"),
        Worker(id=2, name="Bruno"),
        Worker(id=3, name="Carla"),
        Worker(id=4, name="Davi", status="on_leave"),
        ServiceType(id=10, name="Baralho", start_time="09:00", end_time="11:00", weekday_set=["friday"]),
        ServiceType(id=30, name="Consulta", start_time="14:00", end_time="16:00", weekday_set=["monday"]),
        ServiceType(id=40, name="Arquivo", start_time="08:00", end_time="09:00", active=False),
    ])
    db_session.flush()
    db_session.add_all([
        Capability(worker_id=1, service_type_id=10),
        Capability(worker_id=2, service_type_id=10),
        Capability(worker_id=3, service_type_id=30),
        Capability(worker_id=4, service_type_id=30),
        Capability(worker_id=1, service_type_id=40),
    ])
    db_session.commit()


@pytest.fixture
def sample_config():
    return SchedulerConfig(default_actor="coordinator")


@pytest.mark.integration
def test_load_snapshot_skips_inactive_records(db_session, roster):
    """Test that the snapshot holds only active workers and service types."""
    snapshot = load_snapshot(db_session)
    assert [w.id for w in snapshot.workers] == [1, 2, 3]
    assert [s.name for s in snapshot.service_types] == ["Baralho", "Consulta"]
    assert len(snapshot.capabilities) == 5


@pytest.mark.integration
def test_build_month_schedule_persists_draft(db_session, roster, sample_config):
    """Test that a clean run is stored as a draft batch."""
    result, batch = build_month_schedule(db_session, 2026, 2, sample_config)

    assert result.ok
    assert result.stats.total_dates == 8
    assert result.stats.total_service_types == 2
    assert len(result.line_items) == 8
    assert batch is not None
    assert batch.status == "draft"
    assert batch.created_by == "coordinator"
    assert db_session.query(ScheduleLineItem).filter_by(batch_id=batch.id).count() == 8

    fridays = [i for i in result.line_items if i.service_type_id == 10]
    assert [i.worker_id for i in fridays] == [1, 2, 1, 2]
    assert {i.worker_id for i in result.line_items if i.service_type_id == 30} == {3}


@pytest.mark.integration
def test_build_month_schedule_uses_configured_weekdays(db_session, roster):
    """Test that the scheduled weekdays come from configuration."""
    cfg = SchedulerConfig(schedule_weekdays=("friday",))
    result, batch = build_month_schedule(db_session, 2026, 2, cfg, created_by="ana")

    assert result.stats.total_dates == 4
    assert {i.service_type_name for i in result.line_items} == {"Baralho"}
    assert batch.created_by == "ana"


@pytest.mark.integration
def test_dry_run_does_not_persist(db_session, roster, sample_config):
    """Test persist=False returns the proposal only."""
    result, batch = build_month_schedule(db_session, 2026, 2, sample_config, persist=False)

    assert len(result.line_items) == 8
    assert batch is None
    assert db_session.query(ScheduleBatch).count() == 0


@pytest.mark.integration
def test_errors_block_persistence(db_session, roster, sample_config):
    """Test a fixed role on an inactive worker stops the draft from being saved."""
    db_session.add(FixedRole(worker_id=4, service_type_id=30, function_label="Lead"))
    db_session.commit()

    result, batch = build_month_schedule(db_session, 2026, 2, sample_config)

    assert not result.ok
    assert len(result.errors) == 4
    assert batch is None
    assert db_session.query(ScheduleBatch).count() == 0


@pytest.mark.integration
def test_second_run_for_same_month_raises(db_session, roster, sample_config):
    """Test that a month is generated at most once."""
    build_month_schedule(db_session, 2026, 2, sample_config)
    with pytest.raises(DuplicateBatchError):
        build_month_schedule(db_session, 2026, 2, sample_config)
    assert db_session.query(ScheduleBatch).count() == 1


@pytest.mark.integration
def test_duplicate_fixed_roles_warn_and_oldest_wins(db_session, roster, sample_config, capsys):
    """Test that only the first fixed role of a service type is used."""
    db_session.add(FixedRole(worker_id=2, service_type_id=10))
    db_session.commit()
    db_session.add(FixedRole(worker_id=1, service_type_id=10))
    db_session.commit()

    result, batch = build_month_schedule(db_session, 2026, 2, sample_config)

    out = capsys.readouterr().out
    assert "[WARN] Service type 10 has 2 active fixed roles" in out
    fridays = [i for i in result.line_items if i.service_type_id == 10]
    assert {i.worker_id for i in fridays} == {2}
    assert all(i.from_fixed_role for i in fridays)


@pytest.mark.integration
def test_empty_month_is_not_persisted(db_session, sample_config):
    """Test that a run with nothing to schedule stores nothing."""
    db_session.add(Worker(id=1, name="Ana"))
    db_session.commit()

    result, batch = build_month_schedule(db_session, 2026, 2, sample_config)

    assert result.line_items == []
    assert result.ok
    assert batch is None


@pytest.mark.integration
def test_persisted_items_keep_dates(db_session, roster, sample_config):
    """Test that stored line-items match the proposal."""
    result, batch = build_month_schedule(db_session, 2026, 3, sample_config)

    stored = (
        db_session.query(ScheduleLineItem)
        .filter_by(batch_id=batch.id)
        .order_by(ScheduleLineItem.service_date, ScheduleLineItem.id)
        .all()
    )
    assert [i.service_date for i in stored] == [i.service_date for i in result.line_items]
    # March 2026 starts on a Sunday
    assert stored[0].service_date == date(2026, 3, 2)
    assert stored[-1].service_date == date(2026, 3, 30)
