#!/usr/bin/env python3
"""Operator utilities for the jobs table.

Repairs data that slipped past the lenient write path and seeds demo data.
Works across all owners; not exposed over HTTP.

Usage:
    jobtrack-admin inspect
    jobtrack-admin fix-status --dry-run
    jobtrack-admin fix-future-dates
    jobtrack-admin seed user_2abc --count 25 --months 3
    jobtrack-admin migrate-owner user_old user_new
"""
import argparse
import logging
import random
import sys
from datetime import datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.orm import Session

from .db.database import get_engine, get_session, init_db
from .models import JOB_MODES, JOB_STATUSES, Job, utcnow

logger = logging.getLogger(__name__)

POSITIONS = [
    "Frontend Developer",
    "Backend Engineer",
    "Full Stack Developer",
    "Software Engineer",
    "DevOps Engineer",
    "Data Scientist",
    "Product Manager",
    "QA Engineer",
]

COMPANIES = [
    "TechCorp",
    "StartupXYZ",
    "CloudNine",
    "DataFlow",
    "CodeCraft",
    "InnovateLabs",
    "ScaleUp",
    "DigitalWave",
]

LOCATIONS = [
    "Remote",
    "New York, NY",
    "Austin, TX",
    "Seattle, WA",
    "London, UK",
    "Berlin, Germany",
]


# ---------------------------------------------------------------------------
# 1) Inspect
# ---------------------------------------------------------------------------

def inspect_jobs(session: Session, now: Optional[datetime] = None) -> dict:
    """Summarize raw data quality.

    Returns:
        {"total": N, "owners": {owner_id: N}, "statuses": {raw_value: N},
         "unknown_status": N, "future_dated": N}

    ``unknown_status`` counts rows whose lower-cased status is outside
    JOB_STATUSES; the status counts never see them.
    """
    now = now or utcnow()
    total = session.query(func.count(Job.id)).scalar() or 0
    owners = dict(
        session.query(Job.owner_id, func.count(Job.id)).group_by(Job.owner_id).all()
    )
    statuses = dict(
        session.query(Job.status, func.count(Job.id)).group_by(Job.status).all()
    )
    unknown = sum(
        n for value, n in statuses.items() if (value or "").lower() not in JOB_STATUSES
    )
    future = (
        session.query(func.count(Job.id)).filter(Job.created_at > now).scalar() or 0
    )
    return {
        "total": total,
        "owners": owners,
        "statuses": statuses,
        "unknown_status": unknown,
        "future_dated": future,
    }


# ---------------------------------------------------------------------------
# 2) Status repair
# ---------------------------------------------------------------------------

def normalize_status(raw: Optional[str]) -> Optional[str]:
    """Canonical status for ``raw``, or None when it can't be repaired.

    "declined\\n" → "declined", "" → "pending", "unknown" → None
    """
    cleaned = (raw or "").strip().lower()
    if not cleaned:
        return "pending"
    if cleaned in JOB_STATUSES:
        return cleaned
    return None


def fix_status_values(session: Session, dry_run: bool = False) -> int:
    """Rewrite repairable status values in place. Unknown values stay as-is."""
    fixed = 0
    for job in session.query(Job).all():
        normalized = normalize_status(job.status)
        if normalized and normalized != job.status:
            logger.info(f"Job {job.id}: status {job.status!r} → {normalized!r}")
            if not dry_run:
                job.status = normalized
            fixed += 1
    if not dry_run:
        session.flush()
    return fixed


# ---------------------------------------------------------------------------
# 3) Future-date repair
# ---------------------------------------------------------------------------

def repaired_date(old: datetime, now: datetime, rng: random.Random) -> datetime:
    """Past replacement for a future ``old`` timestamp.

    Same calendar month as ``now``: keep the month, pick a day up to today.
    Otherwise: a random day (1..28) within the last six months.
    """
    if old.year == now.year and old.month == now.month:
        candidate = old.replace(day=rng.randint(1, now.day))
    else:
        past = now - relativedelta(months=rng.randint(0, 5))
        candidate = past.replace(day=rng.randint(1, 28))
    # Picks in the current month can still land after now
    return min(candidate, now)


def fix_future_dates(
    session: Session,
    now: Optional[datetime] = None,
    dry_run: bool = False,
    rng: Optional[random.Random] = None,
) -> int:
    """Move jobs with created_at after ``now`` into the past."""
    now = now or utcnow()
    rng = rng or random.Random()
    future_jobs = session.query(Job).filter(Job.created_at > now).all()
    for job in future_jobs:
        new_date = repaired_date(job.created_at, now, rng)
        logger.info(f"Job {job.id}: created_at {job.created_at} → {new_date}")
        if not dry_run:
            job.created_at = new_date
            job.updated_at = new_date
    if not dry_run:
        session.flush()
    return len(future_jobs)


# ---------------------------------------------------------------------------
# 4) Seed
# ---------------------------------------------------------------------------

def seed_jobs(
    session: Session,
    owner_id: str,
    count: int = 20,
    months: int = 3,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> list[Job]:
    """Replace ``owner_id``'s jobs with ``count`` random ones spread over ``months``."""
    now = now or utcnow()
    rng = rng or random.Random()
    removed = session.query(Job).filter(Job.owner_id == owner_id).delete()
    logger.info(f"Removed {removed} existing jobs for owner={owner_id}")

    start = now - relativedelta(months=months)
    span = (now - start).total_seconds()
    jobs = []
    for _ in range(count):
        created = now - timedelta(seconds=rng.uniform(0, span))
        job = Job(
            owner_id=owner_id,
            position=rng.choice(POSITIONS),
            company=rng.choice(COMPANIES),
            location=rng.choice(LOCATIONS),
            status=rng.choice(JOB_STATUSES),
            mode=rng.choice(JOB_MODES),
            created_at=created,
            updated_at=created,
        )
        session.add(job)
        jobs.append(job)
    session.flush()
    return jobs


# ---------------------------------------------------------------------------
# 5) Owner migration
# ---------------------------------------------------------------------------

def migrate_owner(session: Session, old_owner_id: str, new_owner_id: str) -> int:
    """Reassign every job of ``old_owner_id`` to ``new_owner_id``.

    Used when the identity provider issues a new subject for an existing user.
    """
    if not old_owner_id or not new_owner_id:
        raise ValueError("Both owner ids are required")
    moved = (
        session.query(Job)
        .filter(Job.owner_id == old_owner_id)
        .update({Job.owner_id: new_owner_id}, synchronize_session=False)
    )
    session.flush()
    logger.info(f"Migrated {moved} job(s) from {old_owner_id} to {new_owner_id}")
    return moved


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="JobTrack data maintenance")
    parser.add_argument(
        "--db",
        default=None,
        help="Database URL (default: from config / DATABASE_URL)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("inspect", help="Show owners, status values and future-dated jobs")

    p_status = sub.add_parser("fix-status", help="Trim/lower-case status values")
    p_status.add_argument("--dry-run", action="store_true")

    p_dates = sub.add_parser("fix-future-dates", help="Move future created_at into the past")
    p_dates.add_argument("--dry-run", action="store_true")

    p_seed = sub.add_parser("seed", help="Replace an owner's jobs with random data")
    p_seed.add_argument("owner_id")
    p_seed.add_argument("--count", type=int, default=20)
    p_seed.add_argument("--months", type=int, default=3)

    p_migrate = sub.add_parser("migrate-owner", help="Move all jobs from one owner id to another")
    p_migrate.add_argument("old_owner_id")
    p_migrate.add_argument("new_owner_id")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = get_engine(args.db)
    init_db(engine)
    try:
        with get_session(engine) as session:
            if args.command == "inspect":
                report = inspect_jobs(session)
                print(f"Total jobs: {report['total']}")
                print("Jobs per owner:")
                for owner, n in sorted(report["owners"].items(), key=lambda kv: -kv[1]):
                    print(f"  {owner}: {n}")
                print("Status values:")
                for value, n in sorted(report["statuses"].items(), key=lambda kv: -kv[1]):
                    print(f"  {value!r}: {n}")
                if report["unknown_status"]:
                    print(f"Unknown status values: {report['unknown_status']} job(s) (not counted in stats)")
                print(f"Future-dated jobs: {report['future_dated']}")

            elif args.command == "fix-status":
                n = fix_status_values(session, dry_run=args.dry_run)
                verb = "Would fix" if args.dry_run else "Fixed"
                logger.info(f"{verb} {n} status value(s)")

            elif args.command == "fix-future-dates":
                n = fix_future_dates(session, dry_run=args.dry_run)
                verb = "Would fix" if args.dry_run else "Fixed"
                logger.info(f"{verb} {n} future-dated job(s)")

            elif args.command == "seed":
                jobs = seed_jobs(session, args.owner_id, args.count, args.months)
                logger.info(f"✓ Seeded {len(jobs)} jobs for owner={args.owner_id}")

            elif args.command == "migrate-owner":
                migrate_owner(session, args.old_owner_id, args.new_owner_id)
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
