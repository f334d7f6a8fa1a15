"""
Create a user (e.g. the first admin; the API only registers USER accounts). Run from project root:
  python -m app.scripts.create_user NAME EMAIL USERNAME PASSWORD [--role ADMIN]
Example:
  python -m app.scripts.create_user "Site Admin" admin@example.com admin your-secure-password --role ADMIN
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.exceptions import ServiceError
from app.models.user import Role
from app.services.users import register_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a Gatekeeper user.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Email (must be unique)")
    parser.add_argument("username", help="Username (must be unique)")
    parser.add_argument("password", help="Password")
    parser.add_argument(
        "--role",
        default=Role.USER.value,
        choices=[r.value for r in Role],
        help="Role to assign (default: USER)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    db = SessionLocal()
    try:
        user = register_user(
            db,
            name=args.name.strip(),
            email=args.email.strip(),
            password=args.password,
            username=args.username.strip(),
            role=Role(args.role),
        )
    except ServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' ({user.id}) with role '{user.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
