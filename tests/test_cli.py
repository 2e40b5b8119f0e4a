"""End-to-end tests for the command-line interface."""

import pytest

from rostering.cli import main
from rostering.domain.db import get_session
from rostering.domain.models import ScheduleBatch, ScheduleLineItem, SubstitutionRequest


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'roster.db'}"


@pytest.fixture
def seeded(db_url, tmp_path):
    """Initialized database with two workers sharing one Friday service."""
    workers = tmp_path / "workers.csv"
    workers.write_text("id,name\n1,Ana\n2,Bruno\n")
    service_types = tmp_path / "service_types.csv"
    service_types.write_text("id,name,start_time,end_time,weekdays\n10,Baralho,09:00,11:00,friday\n")
    capabilities = tmp_path / "capabilities.csv"
    capabilities.write_text("worker_id,service_type_id\n1,10\n2,10\n")

    main(["--db", db_url, "init-db"])
    main([
        "--db", db_url, "import-csv",
        "--workers", str(workers),
        "--service-types", str(service_types),
        "--capabilities", str(capabilities),
    ])
    return db_url


def _query(db_url, model):
    session = get_session(db_url)
    try:
        return session.query(model).order_by(model.id).all()
    finally:
        session.close()


@pytest.mark.integration
def test_generate_review_and_publish(seeded, capsys):
    """Test the draft workflow from generation to publication."""
    main(["--db", seeded, "generate", "--year", "2026", "--month", "2", "--actor", "coordinator"])
    out = capsys.readouterr().out
    assert "[OK] Draft batch 1 saved for review" in out

    items = _query(seeded, ScheduleLineItem)
    assert [i.worker_id for i in items] == [1, 2, 1, 2]

    main(["--db", seeded, "review", "--year", "2026", "--month", "2"])
    out = capsys.readouterr().out
    assert "Batch 1 2026-02 [draft] - 4 line-items" in out

    main(["--db", seeded, "validate", "--year", "2026", "--month", "2"])
    assert "[OK] Validation passed for 2026-02" in capsys.readouterr().out

    main(["--db", seeded, "publish", "--year", "2026", "--month", "2"])
    batch = _query(seeded, ScheduleBatch)[0]
    assert batch.status == "published"
    assert batch.created_by == "coordinator"


@pytest.mark.integration
def test_dry_run_generates_nothing(seeded):
    """Test --dry-run leaves the database untouched."""
    main(["--db", seeded, "generate", "--year", "2026", "--month", "2", "--dry-run"])
    assert _query(seeded, ScheduleBatch) == []


@pytest.mark.integration
def test_rule_violation_exits_with_status_one(seeded, capsys):
    """Test a named rule violation is printed and exits non-zero."""
    main(["--db", seeded, "generate", "--year", "2026", "--month", "2"])
    capsys.readouterr()

    with pytest.raises(SystemExit) as exc_info:
        main(["--db", seeded, "generate", "--year", "2026", "--month", "2"])

    assert exc_info.value.code == 1
    assert "already exists for 2026-02" in capsys.readouterr().out


@pytest.mark.integration
def test_invalid_reassignment_exits_with_reasons(seeded, capsys):
    """Test a refused reassignment prints every reason."""
    main(["--db", seeded, "generate", "--year", "2026", "--month", "2"])
    capsys.readouterr()

    with pytest.raises(SystemExit):
        main(["--db", seeded, "reassign", "--line-item", "1", "--worker", "99"])

    assert "no capability" in capsys.readouterr().out
    assert _query(seeded, ScheduleLineItem)[0].worker_id == 1


@pytest.mark.integration
def test_substitution_flow(seeded, capsys):
    """Test request, listing and approval of a substitution."""
    main(["--db", seeded, "generate", "--year", "2026", "--month", "2"])
    main(["--db", seeded, "publish", "--year", "2026", "--month", "2"])
    capsys.readouterr()

    main([
        "--db", seeded, "request-sub",
        "--line-item", "1", "--reason", "Medical appointment", "--proposed", "2",
    ])
    assert "[OK] Substitution request 1 is pending" in capsys.readouterr().out

    main(["--db", seeded, "list-subs", "--status", "pending"])
    assert "Medical appointment" in capsys.readouterr().out

    main(["--db", seeded, "approve-sub", "--request", "1", "--approver", "coordinator"])

    request = _query(seeded, SubstitutionRequest)[0]
    assert request.status == "approved"
    assert request.approved_by == "coordinator"
    assert _query(seeded, ScheduleLineItem)[0].worker_id == 2
