"""Employee management command line interface.

Provides operational tools for:
- Creating the database schema
- Provisioning an admin account
- Running the API server

Usage:
    employee-mgmt init-db
    employee-mgmt create-admin --email admin@example.com --password secret
    employee-mgmt serve --port 5000
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Callable

import uvicorn

from employee_mgmt.config import Settings, get_settings
from employee_mgmt.database import create_engine_for, create_session_factory, create_tables, session_scope
from employee_mgmt.errors import EmsError
from employee_mgmt.security import ROLE_ADMIN
from employee_mgmt.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class EmsCli:
    """Employee management command line interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="employee-mgmt",
            description="Employee management operational tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        init_db = subparsers.add_parser(
            "init-db",
            help="Create database tables that do not exist yet",
        )
        init_db.add_argument(
            "--database-url",
            type=str,
            help="Database URL (default: DATABASE_URL setting)",
        )

        admin = subparsers.add_parser(
            "create-admin",
            help="Provision an admin account",
        )
        admin.add_argument("--email", type=str, required=True, help="Login email")
        admin.add_argument("--password", type=str, required=True, help="Initial password")
        admin.add_argument("--first-name", type=str, default="Admin", help="First name (default: Admin)")
        admin.add_argument("--last-name", type=str, default="User", help="Last name (default: User)")
        admin.add_argument(
            "--database-url",
            type=str,
            help="Database URL (default: DATABASE_URL setting)",
        )

        serve = subparsers.add_parser(
            "serve",
            help="Run the API server",
        )
        serve.add_argument("--host", type=str, default=self.settings.host, help="Bind address")
        serve.add_argument("--port", type=int, default=self.settings.port, help="Bind port")
        serve.add_argument("--reload", action="store_true", help="Reload on code changes")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        handlers: dict[str, Callable[..., int]] = {
            "init-db": self._cmd_init_db,
            "create-admin": self._cmd_create_admin,
            "serve": self._cmd_serve,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create the schema."""
        url = args.database_url or self.settings.database_url
        print(f"Initializing database: {url}")
        asyncio.run(self._init_db(url))
        print("Tables created.")
        return 0

    async def _init_db(self, url: str) -> None:
        engine = create_engine_for(url)
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    def _cmd_create_admin(self, args: argparse.Namespace) -> int:
        """Provision an admin account."""
        url = args.database_url or self.settings.database_url
        try:
            user_id = asyncio.run(
                self._create_admin(url, args.first_name, args.last_name, args.email, args.password)
            )
        except EmsError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1
        print(f"Admin account created: {args.email} (id={user_id})")
        return 0

    async def _create_admin(
        self,
        url: str,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> int:
        engine = create_engine_for(url)
        try:
            await create_tables(engine)
            async with session_scope(create_session_factory(engine)) as session:
                auth = AuthService(session, self.settings.jwt_secret, self.settings.token_ttl_hours)
                user = await auth.create_account(first_name, last_name, email, password, ROLE_ADMIN)
                return user.id
        finally:
            await engine.dispose()

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        """Run uvicorn against the app factory."""
        logging.basicConfig(
            level=self.settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        logger.info("Serving on %s:%s", args.host, args.port)
        uvicorn.run(
            "employee_mgmt.api.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            reload=args.reload,
        )
        return 0


def main() -> int:
    """CLI entry point."""
    cli = EmsCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
