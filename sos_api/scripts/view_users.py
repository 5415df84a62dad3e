"""
Print registered users and the most recent login attempts. Run from project root:
  python -m sos_api.scripts.view_users [--attempts N]
"""

import argparse
import sys
from typing import TextIO

from sos_api.core.config import get_settings
from sos_api.core.database import Database
from sos_api.models import LoginAttempt, User
from sos_api.services.auth import list_login_attempts

DEFAULT_ATTEMPTS = 10


def _print_table(rows: list[tuple], headers: tuple[str, ...], out: TextIO) -> None:
    cells = [headers] + [tuple("" if v is None else str(v) for v in row) for row in rows]
    widths = [max(len(row[i]) for row in cells) for i in range(len(headers))]
    for row in cells:
        print("  ".join(value.ljust(width) for value, width in zip(row, widths)).rstrip(), file=out)


def render(users: list[User], attempts: list[LoginAttempt], out: TextIO) -> None:
    print("\n=== USERS ===", file=out)
    _print_table(
        [(u.id, u.username, u.role, u.created_at) for u in users],
        ("id", "username", "role", "created_at"),
        out,
    )
    print(f"\n=== LOGIN ATTEMPTS (Last {len(attempts)}) ===", file=out)
    _print_table(
        [(a.id, a.username, a.role, a.success, a.blocked, a.created_at) for a in attempts],
        ("id", "username", "role", "success", "blocked", "created_at"),
        out,
    )


def main(argv: list[str] | None = None, database: Database | None = None, out: TextIO = sys.stdout) -> int:
    parser = argparse.ArgumentParser(description="Show SOS API users and recent login attempts.")
    parser.add_argument("--attempts", type=int, default=DEFAULT_ATTEMPTS, help="How many attempts to show")
    args = parser.parse_args(argv)

    database = database or Database(get_settings())
    database.connect()
    with database.session() as db:
        users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
        attempts = list_login_attempts(db, limit=args.attempts)
        render(users, attempts, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
