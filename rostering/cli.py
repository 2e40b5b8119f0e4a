"""Command-line interface for the monthly rostering engine."""

from __future__ import annotations

import argparse
from typing import Callable

from sqlalchemy.orm import Session

from rostering.config import SchedulerConfig, load_config
from rostering.domain.db import get_session, init_database, reset_database
from rostering.domain.errors import SchedulingError
from rostering.domain.repositories import CapabilityRepository, DateRestrictionRepository
from rostering.engine.orchestrator import build_month_schedule
from rostering.io.import_csv import (
    import_capabilities_csv,
    import_fixed_roles_csv,
    import_restrictions_csv,
    import_service_types_csv,
    import_workers_csv,
)
from rostering.services.lifecycle import ScheduleLifecycleManager
from rostering.services.substitutions import SubstitutionWorkflow
from rostering.validator import summarize_line_items, validate_batch


def _config(args: argparse.Namespace) -> SchedulerConfig:
    cfg = load_config(args.config)
    if args.db:
        cfg.db_url = args.db
    return cfg


def _with_session(args: argparse.Namespace, action: Callable[[Session, SchedulerConfig], None]) -> None:
    """Run an action in a session; named rule violations exit with status 1."""
    cfg = _config(args)
    session = get_session(cfg.db_url)
    try:
        action(session, cfg)
    except SchedulingError as e:
        session.rollback()
        print(f"[ERROR] {e}")
        raise SystemExit(1)
    except Exception as e:
        session.rollback()
        print(f"[ERROR] {args.command} failed: {e}")
        raise
    finally:
        session.close()


def _find_batch_or_exit(manager: ScheduleLifecycleManager, year: int, month: int):
    batch = manager.find_batch(year, month)
    if batch is None:
        print(f"[ERROR] No schedule batch found for {year:04d}-{month:02d}")
        raise SystemExit(1)
    return batch


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    cfg = _config(args)
    if args.reset:
        reset_database(cfg.db_url)
    else:
        init_database(cfg.db_url)
    print(f"[OK] Database ready: {cfg.db_url}")


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import CSV data into database. Order matters for foreign keys."""

    def action(session: Session, cfg: SchedulerConfig) -> None:
        if args.workers:
            import_workers_csv(session, args.workers)
        if args.service_types:
            import_service_types_csv(session, args.service_types)
        if args.capabilities:
            import_capabilities_csv(session, args.capabilities)
        if args.fixed_roles:
            import_fixed_roles_csv(session, args.fixed_roles)
        if args.restrictions:
            import_restrictions_csv(session, args.restrictions)
        print("[OK] CSV import complete")

    _with_session(args, action)


def _cmd_generate(args: argparse.Namespace) -> None:
    """Generate the schedule for a month."""

    def action(session: Session, cfg: SchedulerConfig) -> None:
        result, batch = build_month_schedule(
            session,
            args.year,
            args.month,
            cfg,
            created_by=args.actor,
            persist=not args.dry_run,
        )
        stats = result.stats
        print(
            f"[INFO] {stats.total_dates} dates, {stats.total_service_types} service types, "
            f"{stats.total_line_items} line-items, {len(result.warnings)} warning(s), "
            f"{len(result.errors)} error(s)"
        )
        print(summarize_line_items(result.line_items))
        if batch is not None:
            print(f"[OK] Draft batch {batch.id} saved for review")
        if result.errors:
            raise SystemExit(1)

    _with_session(args, action)


def _cmd_review(args: argparse.Namespace) -> None:
    """Show the line-items of a month's batch."""

    def action(session: Session, cfg: SchedulerConfig) -> None:
        manager = ScheduleLifecycleManager(session)
        batch = _find_batch_or_exit(manager, args.year, args.month)
        items = manager.list_line_items(batch.id)
        print(f"Batch {batch.id} {batch.period} [{batch.status}] - {len(items)} line-items")
        for item in items:
            marker = " (fixed)" if item.from_fixed_role else ""
            label = f" [{item.function_label}]" if item.function_label else ""
            print(
                f"  #{item.id:<5} {item.service_date.isoformat()}  {item.service_type_name:<20} "
                f"{item.start_time}-{item.end_time}  {item.worker_name}{label}{marker}"
            )
        print()
        print(summarize_line_items(items))

    _with_session(args, action)


def _cmd_validate(args: argparse.Namespace) -> None:
    """Check a month's batch for overlaps, missing capabilities and restrictions."""

    def action(session: Session, cfg: SchedulerConfig) -> None:
        manager = ScheduleLifecycleManager(session)
        batch = _find_batch_or_exit(manager, args.year, args.month)
        problems = validate_batch(
            manager.list_line_items(batch.id),
            CapabilityRepository.get_all(session),
            DateRestrictionRepository.get_all(session),
        )
        if problems:
            for problem in problems:
                print(f"[ERROR] {problem}")
            raise SystemExit(1)
        print(f"[OK] Validation passed for {batch.period}")

    _with_session(args, action)


def _cmd_reassign(args: argparse.Namespace) -> None:
    """Move a draft line-item to another worker."""

    def action(session: Session, cfg: SchedulerConfig) -> None:
        result = ScheduleLifecycleManager(session).reassign_line_item(args.line_item, args.worker)
        if not result.valid:
            for error in result.errors:
                print(f"[ERROR] {error}")
            raise SystemExit(1)
        print(f"[OK] Line-item {args.line_item} now assigned to worker {args.worker}")

    _with_session(args, action)


def _cmd_remove(args: argparse.Namespace) -> None:
    """Delete a draft line-item."""

    def action(session: Session, cfg: SchedulerConfig) -> None:
        ScheduleLifecycleManager(session).delete_line_item(args.line_item)
        print(f"[OK] Line-item {args.line_item} removed")

    _with_session(args, action)


def _cmd_publish(args: argparse.Namespace) -> None:
    """Publish a month's draft."""

    def action(session: Session, cfg: SchedulerConfig) -> None:
        manager = ScheduleLifecycleManager(session)
        batch = _find_batch_or_exit(manager, args.year, args.month)
        manager.publish(batch.id)

    _with_session(args, action)


def _cmd_request_sub(args: argparse.Namespace) -> None:
    """Open a substitution request."""

    def action(session: Session, cfg: SchedulerConfig) -> None:
        request = SubstitutionWorkflow(session).request_substitution(
            args.line_item,
            args.requester or cfg.default_actor,
            args.reason,
            proposed_worker_id=args.proposed,
        )
        print(f"[OK] Substitution request {request.id} is pending")

    _with_session(args, action)


def _cmd_approve_sub(args: argparse.Namespace) -> None:
    def action(session: Session, cfg: SchedulerConfig) -> None:
        SubstitutionWorkflow(session).approve(args.request, args.approver or cfg.default_actor)

    _with_session(args, action)


def _cmd_reject_sub(args: argparse.Namespace) -> None:
    def action(session: Session, cfg: SchedulerConfig) -> None:
        SubstitutionWorkflow(session).reject(args.request, args.approver or cfg.default_actor)

    _with_session(args, action)


def _cmd_list_subs(args: argparse.Namespace) -> None:
    def action(session: Session, cfg: SchedulerConfig) -> None:
        requests = SubstitutionWorkflow(session).list_requests(args.status)
        if not requests:
            print("No substitution requests.")
            return
        for req in requests:
            proposed = req.proposed_worker_id if req.proposed_worker_id is not None else "-"
            print(
                f"  #{req.id:<5} line-item {req.line_item_id:<5} proposed {proposed!s:<5} "
                f"[{req.status}] by {req.requested_by}: {req.reason}"
            )

    _with_session(args, action)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="rostering",
        description="Monthly service rostering: generate, review, publish and substitute",
    )

    # Global options
    parser.add_argument("--db", help="Database URL (default: from config, sqlite:///rostering.db)")
    parser.add_argument("--config", help="Path to config YAML/JSON (optional)")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize database")
    init.add_argument("--reset", action="store_true", help="Drop and recreate all tables")
    init.set_defaults(func=_cmd_init_db)

    imp = sub.add_parser("import-csv", help="Import roster CSV data into database")
    imp.add_argument("--workers", help="Path to workers CSV")
    imp.add_argument("--service-types", help="Path to service types CSV")
    imp.add_argument("--capabilities", help="Path to capabilities CSV")
    imp.add_argument("--fixed-roles", help="Path to fixed roles CSV")
    imp.add_argument("--restrictions", help="Path to date restrictions CSV")
    imp.set_defaults(func=_cmd_import_csv)

    gen = sub.add_parser("generate", help="Generate the schedule for a month")
    gen.add_argument("--year", type=int, required=True)
    gen.add_argument("--month", type=int, required=True)
    gen.add_argument("--actor", help="Creator recorded on the batch")
    gen.add_argument("--dry-run", action="store_true", help="Do not persist the draft")
    gen.set_defaults(func=_cmd_generate)

    rev = sub.add_parser("review", help="Show a month's batch")
    rev.add_argument("--year", type=int, required=True)
    rev.add_argument("--month", type=int, required=True)
    rev.set_defaults(func=_cmd_review)

    val = sub.add_parser("validate", help="Validate a month's batch")
    val.add_argument("--year", type=int, required=True)
    val.add_argument("--month", type=int, required=True)
    val.set_defaults(func=_cmd_validate)

    rea = sub.add_parser("reassign", help="Reassign a draft line-item")
    rea.add_argument("--line-item", type=int, required=True)
    rea.add_argument("--worker", type=int, required=True)
    rea.set_defaults(func=_cmd_reassign)

    rem = sub.add_parser("remove", help="Remove a draft line-item")
    rem.add_argument("--line-item", type=int, required=True)
    rem.set_defaults(func=_cmd_remove)

    pub = sub.add_parser("publish", help="Publish a month's draft")
    pub.add_argument("--year", type=int, required=True)
    pub.add_argument("--month", type=int, required=True)
    pub.set_defaults(func=_cmd_publish)

    req = sub.add_parser("request-sub", help="Request a substitution on a published line-item")
    req.add_argument("--line-item", type=int, required=True)
    req.add_argument("--reason", required=True)
    req.add_argument("--requester", help="Requesting actor (default: config default_actor)")
    req.add_argument("--proposed", type=int, help="Proposed replacement worker id")
    req.set_defaults(func=_cmd_request_sub)

    app = sub.add_parser("approve-sub", help="Approve a substitution request")
    app.add_argument("--request", type=int, required=True)
    app.add_argument("--approver", help="Approving actor (default: config default_actor)")
    app.set_defaults(func=_cmd_approve_sub)

    rej = sub.add_parser("reject-sub", help="Reject a substitution request")
    rej.add_argument("--request", type=int, required=True)
    rej.add_argument("--approver", help="Rejecting actor (default: config default_actor)")
    rej.set_defaults(func=_cmd_reject_sub)

    lst = sub.add_parser("list-subs", help="List substitution requests")
    lst.add_argument("--status", choices=["pending", "approved", "rejected"])
    lst.set_defaults(func=_cmd_list_subs)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
