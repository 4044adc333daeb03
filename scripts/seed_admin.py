#!/usr/bin/env python3
# ============================================================
# DEV-ONLY LOCAL SCRIPT
# ============================================================
# Creates (or reuses) a back-office account and prints a bearer
# token for it, so the API can be exercised from curl or /docs.
#
# Usage:
#   DATABASE_URL=postgresql+asyncpg://... python scripts/seed_admin.py [PHONE] [ROLE]
#
# Arguments:
#   PHONE  Phone number of the account (default: +919999999999)
#   ROLE   admin | operational (default: admin)
# ============================================================
from __future__ import annotations

import asyncio
import os
import sys

if os.environ.get("APP_ENV", "development").lower() == "production":
    print("ERROR: seed_admin.py must not run in production (APP_ENV=production).", file=sys.stderr)
    sys.exit(1)

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.careadmin.core.config import get_settings  # noqa: E402
from src.careadmin.core.security import create_access_token  # noqa: E402
from src.careadmin.db.session import close_db, get_db_manager  # noqa: E402
from src.careadmin.models.enums import UserRole  # noqa: E402
from src.careadmin.repositories.user_repository import UserRepository  # noqa: E402


async def main(phone: str, role: str) -> None:
    settings = get_settings()
    db_manager = get_db_manager()
    try:
        async with db_manager.session() as db:
            repo = UserRepository(db)
            user = await repo.get_by_phone(phone)
            if user is None:
                user = await repo.create(
                    phone=phone,
                    email="dev@example.com" if role == UserRole.ADMIN.value else None,
                    role=role,
                    first_name="Dev",
                    last_name=role.title(),
                )
                print(f"User created: ID={user.id}, role={user.role}")
            else:
                print(f"User found: ID={user.id}, role={user.role}")

            token = create_access_token(subject=user.phone, settings=settings, role=user.role)
    finally:
        await close_db()

    print(f"Bearer token:\n{token}")


if __name__ == "__main__":
    _phone = sys.argv[1] if len(sys.argv) > 1 else "+919999999999"
    _role = sys.argv[2] if len(sys.argv) > 2 else UserRole.ADMIN.value
    if _role not in (UserRole.ADMIN.value, UserRole.OPERATIONAL.value):
        print("ROLE must be 'admin' or 'operational'", file=sys.stderr)
        sys.exit(2)
    asyncio.run(main(_phone, _role))
