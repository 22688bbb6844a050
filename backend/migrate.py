#!/usr/bin/env python3
"""
Database maintenance.

    python backend/migrate.py init
    python backend/migrate.py recount [--job-id N]
    python backend/migrate.py create-admin --email a@b.c --password secret --name Admin
"""

import argparse
import sys
from pathlib import Path

# Allow running as a plain script from anywhere.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.app import database  # noqa: E402
from backend.app.logging_config import configure_logging  # noqa: E402
from backend.app.models.choices import ROLE_ADMIN  # noqa: E402
from backend.app.models.user import User  # noqa: E402
from backend.app.services.counters import recount_applications  # noqa: E402
from backend.app.utils.error_handlers import AppError  # noqa: E402
from backend.app.utils.security import hash_password  # noqa: E402
from backend.app.utils.validation import validate_email, validate_password, validate_string_field  # noqa: E402


def cmd_init(args) -> int:
    database.init_db()
    print("✓ Database initialized")
    return 0


def cmd_recount(args) -> int:
    database.init_db()
    db = database.SessionLocal()
    try:
        corrected = recount_applications(db, job_id=args.job_id)
    finally:
        db.close()

    if not corrected:
        print("✓ applicationsCount already consistent")
        return 0
    for row in corrected:
        print(f"✓ job {row['job_id']}: {row['stored']} -> {row['actual']}")
    return 0


def cmd_create_admin(args) -> int:
    try:
        email = validate_email(args.email)
        validate_password(args.password)
        name = validate_string_field(args.name, "name", max_length=255, label="Name")
    except AppError as e:
        print(f"✗ {e.message}")
        return 1

    database.init_db()
    db = database.SessionLocal()
    try:
        if db.query(User).filter(User.email == email).first():
            print(f"✗ A user with email {email} already exists")
            return 1
        user = User(name=name, email=email, password=hash_password(args.password), role=ROLE_ADMIN)
        db.add(user)
        db.commit()
        db.refresh(user)
        print(f"✓ Created admin user {user.id} <{user.email}>")
        return 0
    finally:
        db.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Job board database maintenance")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="create tables").set_defaults(func=cmd_init)

    recount = sub.add_parser("recount", help="recompute Job.applicationsCount from live applications")
    recount.add_argument("--job-id", type=int, default=None)
    recount.set_defaults(func=cmd_recount)

    admin = sub.add_parser("create-admin", help="create an admin account")
    admin.add_argument("--email", required=True)
    admin.add_argument("--password", required=True)
    admin.add_argument("--name", default="Administrator")
    admin.set_defaults(func=cmd_create_admin)
    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
