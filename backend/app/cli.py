"""
Grievance Portal — Command Line
================================

    grievance-portal serve [--host H] [--port P] [--reload]
    grievance-portal init-db
    grievance-portal create-user --username jane [--name "Jane"]
    grievance-portal issue-token --username jane

`create-user` and `issue-token` stand in for the external account flow:
they provision an owner and print a session token the dashboard can send as
its session cookie or Bearer header.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import uvicorn

from app.auth.session import create_session_token
from app.config import settings
from app.database import create_all, dispose_engine, session_scope
from app.exceptions import PortalError
from app.services import user_service

logger = logging.getLogger("grievance.cli")


async def _init_db() -> None:
    try:
        await create_all()
    finally:
        await dispose_engine()


async def _create_user(username: str, name: Optional[str]) -> str:
    try:
        async with session_scope() as db:
            user = await user_service.create_user(db, username, name)
            return create_session_token(str(user.id), user.username, user.name)
    finally:
        await dispose_engine()


async def _issue_token(username: str) -> Optional[str]:
    try:
        async with session_scope() as db:
            user = await user_service.get_by_username(db, username)
            if user is None:
                return None
            return create_session_token(str(user.id), user.username, user.name)
    finally:
        await dispose_engine()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grievance-portal", description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=settings.backend_host)
    serve.add_argument("--port", type=int, default=settings.backend_port)
    serve.add_argument("--reload", action="store_true")

    sub.add_parser("init-db", help="Create tables directly (development databases)")

    create = sub.add_parser("create-user", help="Provision an owner account")
    create.add_argument("--username", required=True)
    create.add_argument("--name", default=None)

    token = sub.add_parser("issue-token", help="Print a session token for an existing user")
    token.add_argument("--username", required=True)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO),
                        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    if args.command == "serve":
        uvicorn.run("app.main:app", host=args.host, port=args.port, reload=args.reload)
        return 0

    if args.command == "init-db":
        asyncio.run(_init_db())
        logger.info("Tables created on %s", settings.database_url.split("@")[-1])
        return 0

    if args.command == "create-user":
        try:
            token = asyncio.run(_create_user(args.username, args.name))
        except PortalError as exc:
            print(exc.message, file=sys.stderr)
            return 1
        print(token)
        return 0

    if args.command == "issue-token":
        token = asyncio.run(_issue_token(args.username))
        if token is None:
            print(f"User '{args.username}' not found", file=sys.stderr)
            return 1
        print(token)
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
