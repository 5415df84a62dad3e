"""
Create a user directly, e.g. an Admin (signup never grants Admin). Run from project root:
  python -m sos_api.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m sos_api.scripts.create_user coordinator a-secure-password Admin
"""
import argparse
import logging
import sys

from sos_api.core.config import get_settings
from sos_api.core.database import Database
from sos_api.core.security import PASSWORD_MIN_LEN, USERNAME_MAX_LEN, USERNAME_MIN_LEN, hash_password
from sos_api.models.user import ROLE_ADMIN, ROLE_USER, User

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None, database: Database | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an SOS API user account.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password (at least {PASSWORD_MIN_LEN} chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=[ROLE_USER, ROLE_ADMIN])
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN:
        print(f"Password must be at least {PASSWORD_MIN_LEN} characters.", file=sys.stderr)
        return 1

    database = database or Database(get_settings())
    database.connect()
    with database.session() as db:
        existing = db.query(User).filter(User.username == username).first()
        if existing:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        user = User(
            username=username,
            password_hash=hash_password(args.password),
            role=args.role,
        )
        db.add(user)
        db.commit()
    logger.info("Created user %r with role %s", username, args.role)
    print(f"Created user '{username}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    sys.exit(main())
