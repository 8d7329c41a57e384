#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from crm.core.config import DEV_BOOTSTRAP_ALLOW, IS_DEV  # noqa: E402
from crm.core.database import SessionLocal, init_db  # noqa: E402
from crm.models.roles import AppRoles  # noqa: E402
from crm.services.seed import upsert_user  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or update a CRM user account.")
    parser.add_argument("--username", required=True, help="Login name")
    parser.add_argument("--email", required=True, help="Email address")
    parser.add_argument("--password", help="Password (required when creating)")
    parser.add_argument("--first-name", default="", help="First name")
    parser.add_argument("--last-name", default="", help="Last name")
    parser.add_argument("--role", default=AppRoles.ADMIN, choices=AppRoles.ALL_ROLES, help="Application role")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Run without DEV_BOOTSTRAP_ALLOW=1",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    if not DEV_BOOTSTRAP_ALLOW and not args.force:
        print("User bootstrap is disabled. Set DEV_BOOTSTRAP_ALLOW=1 or pass --force.")
        return 1

    init_db()

    db = SessionLocal()
    try:
        user, created = upsert_user(
            db,
            username=args.username,
            email=args.email,
            first_name=args.first_name,
            last_name=args.last_name,
            role=args.role,
            password=args.password,
        )
    except ValueError as exc:
        print(str(exc))
        return 1
    finally:
        db.close()

    action = "created" if created else "updated"
    print(f"User {action}: username={user.username} role={user.role}")
    if IS_DEV:
        password_info = args.password if args.password else "<unchanged>"
        print(f"DEV summary -> Username: {user.username} | Email: {user.email} | Password: {password_info}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
