"""
Command-line interface for repairing author counters.

Connects straight to MongoDB with the application settings and recomputes
`account_info.total_posts`, `account_info.total_reads` and `blogs` from the `blogs`
collection.

    blog-platform-reconcile [--dry-run] all
    blog-platform-reconcile [--dry-run] user <user_id>
"""

import argparse
import asyncio
import json
import sys
from typing import Optional

from blog_platform.config import settings
from blog_platform.database import ContentStore, DatabaseManager, IdentityStore
from blog_platform.database.serialization import coerce_object_id
from blog_platform.managers.logging_manager import get_logger
from blog_platform.services.reconciliation_service import ReconciliationService

logger = get_logger(prefix="[ReconcileCLI]")


class ReconcileCLI:
    """CLI tool for counter reconciliation."""

    def __init__(self, database: Optional[DatabaseManager] = None):
        self.database = database or DatabaseManager()

    async def _service(self) -> ReconciliationService:
        await self.database.connect()
        identity_store = IdentityStore(self.database.get_collection(settings.USERS_COLLECTION))
        content_store = ContentStore(self.database.get_collection(settings.BLOGS_COLLECTION), identity_store)
        return ReconciliationService(content_store, identity_store)

    async def reconcile_all(self, dry_run: bool = False) -> bool:
        try:
            service = await self._service()
            report = await service.reconcile_all(dry_run=dry_run)
        except Exception as e:
            logger.error(f"Reconciliation aborted: {e}")
            return False
        finally:
            await self.database.disconnect()

        print(json.dumps(report.to_dict(), indent=2))
        return not report.failures

    async def reconcile_user(self, user_id: str, dry_run: bool = False) -> bool:
        object_id = coerce_object_id(user_id)
        if object_id is None:
            logger.error(f"Invalid user id: {user_id}")
            return False

        try:
            service = await self._service()
            changed = await service.reconcile_user(object_id, dry_run=dry_run)
        except Exception as e:
            logger.error(f"Reconciliation failed for {user_id}: {e}")
            return False
        finally:
            await self.database.disconnect()

        print(json.dumps({"user_id": user_id, "changed": changed, "dry_run": dry_run}))
        return True


def main(argv: Optional[list] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Blog Platform counter reconciliation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report drifted users without writing corrections",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")
    subparsers.add_parser("all", help="Reconcile every user")
    user_parser = subparsers.add_parser("user", help="Reconcile a single user")
    user_parser.add_argument("user_id", help="User _id (24 hex characters)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    cli = ReconcileCLI()

    if args.command == "all":
        success = asyncio.run(cli.reconcile_all(dry_run=args.dry_run))
    elif args.command == "user":
        success = asyncio.run(cli.reconcile_user(args.user_id, dry_run=args.dry_run))
    else:
        parser.print_help()
        sys.exit(1)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
