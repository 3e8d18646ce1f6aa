import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import AppError
from app.database import build_engine, create_db_and_tables
from app.repositories.user_repo import UserRepository
from app.services.user_service import UserService


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Administer Chronotes users")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List users")
    list_cmd.add_argument("--page", type=int, default=1)
    list_cmd.add_argument("--limit", type=int, default=10)

    create_cmd = sub.add_parser("create", help="Create a user")
    create_cmd.add_argument("email", help="Unique email address")
    create_cmd.add_argument("name", help="Display name for the user")

    delete_cmd = sub.add_parser("delete", help="Delete a user by id")
    delete_cmd.add_argument("user_id", type=int)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    engine = build_engine(get_settings())
    create_db_and_tables(engine)
    service = UserService(UserRepository())

    with Session(engine) as session:
        try:
            if args.command == "list":
                result = service.list_users(session, page=args.page, limit=args.limit)
                for user in result.items:
                    print(f"#{user.id}\t{user.email}\t{user.name}")
                print(f"page {result.page} (limit {result.limit}), {result.total} user(s) total")
            elif args.command == "create":
                user = service.create_user(session, args.email, args.name)
                print(f"Created user #{user.id}: {user.name} <{user.email}>")
            elif args.command == "delete":
                service.delete_user(session, args.user_id)
                print(f"Deleted user #{args.user_id}")
        except AppError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1
        finally:
            engine.dispose()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
