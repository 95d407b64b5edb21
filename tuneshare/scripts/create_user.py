"""
Create an account from the command line (e.g. seed or support accounts). Run from project root:
  python -m tuneshare.scripts.create_user USERNAME EMAIL PASSWORD [--full-name NAME] [--verified]
Example:
  python -m tuneshare.scripts.create_user alice alice@example.com s3cret --verified
"""
import argparse
import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy import or_

from tuneshare.core.config import get_settings
from tuneshare.core.database import build_engine, build_session_factory
from tuneshare.core.logging_config import setup_logging
from tuneshare.core.security import hash_password
from tuneshare.models import User
from tuneshare.schemas.auth import SignupRequest

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Tuneshare user without the signup email.")
    parser.add_argument("username", help="Username (3-64 chars: letters, digits, '_' and '.')")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (5-128 chars)")
    parser.add_argument("--full-name", default=None, help="Display name (defaults to username)")
    parser.add_argument("--verified", action="store_true", help="Mark the email as verified")
    args = parser.parse_args(argv)

    load_dotenv()
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    try:
        payload = SignupRequest(
            username=args.username.strip(),
            full_name=args.full_name or args.username.strip(),
            email=args.email.strip(),
            password=args.password,
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"Invalid {field}: {err['msg']}", file=sys.stderr)
        return 1

    email = str(payload.email).lower()
    engine = build_engine(settings.DATABASE_URL)
    db = build_session_factory(engine)()
    try:
        existing = (
            db.query(User)
            .filter(or_(User.username == payload.username, User.email == email))
            .first()
        )
        if existing:
            print(f"User '{payload.username}' or email '{email}' already exists.", file=sys.stderr)
            return 1
        user = User(
            username=payload.username,
            full_name=payload.full_name,
            email=email,
            password_hash=hash_password(payload.password, settings.BCRYPT_ROUNDS),
            is_verified=args.verified,
        )
        db.add(user)
        db.commit()
        logger.info("Created user via CLI", extra={"user_id": user.id})
        print(f"Created user '{payload.username}' (verified={args.verified}).")
        return 0
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
