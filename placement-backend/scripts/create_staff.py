from __future__ import annotations

import argparse
import secrets
import string
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from placement_portal.config import build_sqlalchemy_db_url, settings  # noqa: E402
from placement_portal.database import Base, SessionLocal, engine  # noqa: E402
import placement_portal.models  # noqa: F401,E402  # ensure all models are registered
from placement_portal.models.user import Role  # noqa: E402
from placement_portal.services.storage import Storage  # noqa: E402
from placement_portal.utils.password_hash import hash_password  # noqa: E402


STAFF_ROLES = (Role.OFFICER.value, Role.ADMIN.value)


def _ensure_tables() -> None:
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


def _generate_password(length: int = 20) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Create (or update) a placement officer or admin account. "
            "Use this when ALLOW_STAFF_REGISTRATION=false blocks self-registration."
        )
    )
    parser.add_argument("--username", required=True, help="Login name (stored lowercase)")
    parser.add_argument("--email", required=True, help="Contact email")
    parser.add_argument("--role", choices=STAFF_ROLES, default=Role.ADMIN.value, help="Staff role")
    parser.add_argument("--password", default=None, help="Password (generated if omitted)")
    parser.add_argument("--name", default="Placement Staff", help="Display name")
    parser.add_argument(
        "--update-password",
        action="store_true",
        help="If the user exists, overwrite their password",
    )

    args = parser.parse_args(argv)

    _ensure_tables()

    username = args.username.strip().lower()
    password = args.password or _generate_password()

    with SessionLocal() as db:
        storage = Storage(db)
        user = storage.get_user_by_username(username)
        if user is None:
            user = storage.create_user(
                username=username,
                password=hash_password(password),
                role=Role(args.role),
                name=args.name,
                email=args.email,
            )
            created = True
        else:
            created = False
            if user.role.value not in STAFF_ROLES:
                sys.stderr.write(f"ERROR: user {username} exists with role {user.role.value}\n")
                return 1
            if args.update_password:
                user.password = hash_password(password)
                db.add(user)
                db.commit()

    if created:
        # Print the password so the operator can log in immediately.
        print(f"created {args.role} id={user.id} username={username}")
        if args.password is None:
            print(f"generated password: {password}")
    else:
        print(f"user already exists username={username}")
        if args.update_password:
            print("password updated")
            if args.password is None:
                print(f"generated password: {password}")
        else:
            print("(password not changed)")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
