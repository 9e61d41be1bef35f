import argparse
import getpass
import logging
import sys

from castpress.adapters.auth.crypto import JWTAuthAdapter
from castpress.adapters.clock import SystemClock
from castpress.adapters.sqlite.migrator import SQLiteMigrator
from castpress.adapters.sqlite.repos import SQLiteAdminRepo, SQLiteArticleRepo, SQLitePodcastRepo
from castpress.api.deps import Settings, get_rules, get_settings
from castpress.components.scheduler import create_transitioner, run_tick
from castpress.domain.entities import Admin

logger = logging.getLogger("castpress.cli")


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    applied = SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    print(f"Applied {len(applied)} migrations.")


def handle_create_admin(settings: Settings, args: argparse.Namespace) -> None:
    rules = get_rules()
    repo = SQLiteAdminRepo(settings.db_path, timeout=rules.scheduler.db_timeout_seconds)
    if repo.get_by_username(args.username):
        logger.error("Admin %s already exists.", args.username)
        sys.exit(1)

    password = args.password or getpass.getpass("Password: ")
    if len(password) < rules.auth.password_min_length:
        logger.error(
            "Password must be at least %d characters.", rules.auth.password_min_length
        )
        sys.exit(1)

    admin = Admin(
        username=args.username,
        password_hash=JWTAuthAdapter().hash_password(password),
        is_super_admin=args.super_admin,
        created_at=SystemClock().now_utc(),
    )
    repo.save(admin)
    print(f"Admin '{admin.username}' created (super admin: {admin.is_super_admin}).")


def handle_publish_due(settings: Settings, args: argparse.Namespace) -> None:
    timeout = get_rules().scheduler.db_timeout_seconds
    transitioner = create_transitioner(
        {
            "article": SQLiteArticleRepo(settings.db_path, timeout=timeout),
            "podcast": SQLitePodcastRepo(settings.db_path, timeout=timeout),
        }
    )
    result = run_tick(transitioner)
    print(f"Published {result.total_published} items.")
    if result.errors:
        for kind, error in result.errors.items():
            logger.error("Publishing %s failed: %s", kind, error)
        sys.exit(1)


def handle_serve(settings: Settings, args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("castpress.api.main:app", host=args.host, port=args.port, log_config=None)


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Castpress CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # create-admin
    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("username")
    admin_parser.add_argument("--password", help="Password (prompted when omitted)")
    admin_parser.add_argument("--super-admin", action="store_true", help="Grant super admin")

    # publish-due
    subparsers.add_parser("publish-due", help="Publish drafts whose scheduled date has passed")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    settings = get_settings()

    handlers = {
        "migrate": handle_migrate,
        "create-admin": handle_create_admin,
        "publish-due": handle_publish_due,
        "serve": handle_serve,
    }
    handlers[args.command](settings, args)


if __name__ == "__main__":
    main()
