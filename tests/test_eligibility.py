"""Tests for the eligibility evaluator."""

from datetime import date, datetime

from rostering.domain.models import Capability, DateRestriction, FixedRole, ServiceType, Worker
from rostering.engine.allocation import ProposedLineItem
from rostering.services.eligibility import (
    duplicate_fixed_roles,
    find_fixed_role,
    has_capability,
    has_restriction,
    require_active_worker,
    validate_assignment,
)


FRIDAY = date(2026, 2, 6)


def _baralho():
    return ServiceType(id=1, name="Baralho", start_time="09:00", end_time="11:00", weekday_set=["friday"])


def _item(worker_id, service_type_id, name, start, end, day=FRIDAY):
    return ProposedLineItem(
        worker_id=worker_id,
        worker_name=f"W{worker_id}",
        service_type_id=service_type_id,
        service_type_name=name,
        service_date=day,
        weekday="friday",
        start_time=start,
        end_time=end,
    )


def test_has_capability_requires_active_match():
    caps = [
        Capability(worker_id=1, service_type_id=1),
        Capability(worker_id=2, service_type_id=1, active=False),
    ]
    assert has_capability(1, 1, caps)
    assert not has_capability(2, 1, caps)
    assert not has_capability(1, 2, caps)


def test_has_restriction_matches_worker_and_date():
    rests = [
        DateRestriction(worker_id=1, restriction_date=FRIDAY, reason="Travel"),
        DateRestriction(worker_id=2, restriction_date=FRIDAY, active=False),
    ]
    assert has_restriction(1, FRIDAY, rests)
    assert not has_restriction(1, date(2026, 2, 13), rests)
    assert not has_restriction(2, FRIDAY, rests)


def test_find_fixed_role_returns_first_active():
    roles = [
        FixedRole(id=1, worker_id=1, service_type_id=1, active=False),
        FixedRole(id=2, worker_id=1, service_type_id=1, function_label="Lead"),
    ]
    assert find_fixed_role(1, 1, roles).id == 2
    assert find_fixed_role(1, 2, roles) is None


def test_duplicate_fixed_roles_sorted_oldest_first():
    roles = [
        FixedRole(id=5, worker_id=2, service_type_id=1, created_at=datetime(2026, 1, 2)),
        FixedRole(id=3, worker_id=1, service_type_id=1, created_at=datetime(2026, 1, 1)),
        FixedRole(id=4, worker_id=3, service_type_id=2),
    ]
    dupes = duplicate_fixed_roles(roles)
    assert list(dupes) == [1]
    assert [r.id for r in dupes[1]] == [3, 5]


def test_validate_assignment_valid():
    result = validate_assignment(
        1, _baralho(), FRIDAY, [], [Capability(worker_id=1, service_type_id=1)], []
    )
    assert result.valid
    assert result.errors == []


def test_validate_assignment_reports_every_failure():
    existing = [_item(1, 2, "Passe", "10:00", "12:00")]
    restrictions = [DateRestriction(worker_id=1, restriction_date=FRIDAY)]

    result = validate_assignment(1, _baralho(), FRIDAY, existing, [], restrictions)

    assert not result.valid
    assert len(result.errors) == 3
    assert "capability" in result.errors[0]
    assert "restriction" in result.errors[1]
    assert "Passe" in result.errors[2]


def test_validate_assignment_back_to_back_is_fine():
    existing = [_item(1, 2, "Passe", "11:00", "12:00")]
    result = validate_assignment(
        1, _baralho(), FRIDAY, existing, [Capability(worker_id=1, service_type_id=1)], []
    )
    assert result.valid


def test_require_active_worker():
    passed = validate_assignment(
        1, _baralho(), FRIDAY, [], [Capability(worker_id=1, service_type_id=1)], []
    )
    assert require_active_worker(passed, 1, Worker(id=1, name="Ana")) is passed

    on_leave = require_active_worker(passed, 1, Worker(id=1, name="Ana", status="on_leave"))
    assert not on_leave.valid
    assert on_leave.errors == ["Worker 'Ana' is not active (status 'on_leave')"]

    missing = require_active_worker(validate_assignment(9, _baralho(), FRIDAY, [], [], []), 9, None)
    assert missing.errors[0] == "Worker 9 not found"
    assert len(missing.errors) == 2
