#!/usr/bin/env python3
"""
Book Catalog API -- command-line launcher.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080
  python main.py serve --reload
  python main.py create-user --name "Ada" --email ada@example.com

Environment variables (see core/config.py):
  SECRET_KEY            Required. At least 32 characters.
  DATABASE_URL          SQLAlchemy URL (default: SQLite file next to the code).
  BCRYPT_ROUNDS         bcrypt cost factor (default 10).
  TOKEN_EXPIRE_SECONDS  Token lifetime (default 86400).
  PORT / HOST           Default bind address for `serve`.
"""

import argparse
import getpass
import sys

from core.errors import CatalogError


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from core.config import get_settings

    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    print(f"\nBook Catalog API -- environment={settings.environment}")
    print("─" * 40)
    print(f"  API URL: http://{host}:{port}\n")
    uvicorn.run("asgi:app", host=host, port=port, reload=args.reload)
    return 0


def _create_user(args: argparse.Namespace) -> int:
    """Register a user directly against the configured database."""
    from auth.credentials import CredentialStore
    from auth.store import UserStore
    from core.config import get_settings

    settings = get_settings()
    password = args.password or getpass.getpass("Password: ")

    store = UserStore(settings.database_url)
    try:
        user = CredentialStore(store, rounds=settings.bcrypt_rounds).register(args.name, args.email, password)
    except CatalogError as exc:
        print(f"  [!] {exc.message}")
        for item in exc.details or []:
            print(f"      {item['field']}: {item['message']}")
        return 1
    finally:
        store.close()

    print(f"  Created user {user.email} (id={user.id}).")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="book-catalog",
        description="Book inventory API with bearer-token authentication.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  SECRET_KEY=$(openssl rand -hex 32) python main.py serve
  python main.py serve --port 8080 --reload
  python main.py create-user --name Ada --email ada@example.com
        """,
    )
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: PORT setting)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    serve.set_defaults(func=_serve)

    create = sub.add_parser("create-user", help="Register a user from the command line")
    create.add_argument("--name", required=True)
    create.add_argument("--email", required=True)
    create.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted, so it stays out of shell history)",
    )
    create.set_defaults(func=_create_user)

    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
