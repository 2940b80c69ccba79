"""
Create an approved account (e.g. the first super admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user root_admin admin@example.org 'S3cure!pass' super_admin
"""
import argparse
import sys

from sqlalchemy import or_

from app.core.config import get_settings
from app.core.database import session_scope
from app.core.logging import configure_logging
from app.core.security import USERNAME_PATTERN, hash_password, password_strength_problem
from app.models.user import ROLE_VALUES, User


def main() -> int:
    configure_logging()
    parser = argparse.ArgumentParser(description="Create an approved NGO FRF account.")
    parser.add_argument("username", help="3-30 chars: letters, numbers, underscore")
    parser.add_argument("email", help="Login email (unique)")
    parser.add_argument("password", help="8-128 chars with upper, lower, digit, symbol")
    parser.add_argument("role", nargs="?", default="member", choices=sorted(ROLE_VALUES))
    args = parser.parse_args()

    username = args.username.strip()
    email = args.email.strip().lower()
    if not USERNAME_PATTERN.match(username):
        print("Invalid username.", file=sys.stderr)
        return 1
    if "@" not in email:
        print("Invalid email.", file=sys.stderr)
        return 1
    problem = password_strength_problem(args.password)
    if problem:
        print(problem, file=sys.stderr)
        return 1

    settings = get_settings()
    with session_scope() as db:
        existing = (
            db.query(User).filter(or_(User.username == username, User.email == email)).first()
        )
        if existing:
            print(f"User '{username}' or email '{email}' already exists.", file=sys.stderr)
            return 1
        db.add(
            User(
                username=username,
                email=email,
                password_hash=hash_password(args.password, settings.BCRYPT_ROUNDS),
                role=args.role,
                approval_status="APPROVED",
                failed_attempts=0,
            )
        )
        db.commit()
    print(f"Created approved user '{username}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
