"""
# Reconciliation Service

Recomputes each user's denormalized fields from the `blogs` collection:

- `account_info.total_posts`: number of non-draft blogs by the user
- `account_info.total_reads`: sum of `activity.total_reads` over all the user's blogs
- `blogs`: `_id` of every blog by the user, drafts included, oldest first

These fields only drift when the best-effort step after a blog write fails (see
`blog_secondary_update_failures_total`). The pass is idempotent and is run by an operator through
`cli.reconcile_cli`; it is never scheduled by the application.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from bson import ObjectId

from blog_platform.database.content_store import ContentStore
from blog_platform.database.identity_store import IdentityStore
from blog_platform.managers.logging_manager import get_logger
from blog_platform.services.metrics import blog_metrics
from blog_platform.utils.errors import DependencyError

logger = get_logger(prefix="[ReconciliationService]")


@dataclass
class AuthorStats:
    total_posts: int = 0
    total_reads: int = 0
    blogs: List[ObjectId] = field(default_factory=list)


@dataclass
class ReconciliationReport:
    users_scanned: int = 0
    users_corrected: int = 0
    failures: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "users_scanned": self.users_scanned,
            "users_corrected": self.users_corrected,
            "failures": list(self.failures),
        }


def compute_author_stats(blogs: List[Dict[str, Any]]) -> AuthorStats:
    stats = AuthorStats()
    for blog in blogs:
        if not blog.get("draft", False):
            stats.total_posts += 1
        stats.total_reads += (blog.get("activity") or {}).get("total_reads", 0)
        stats.blogs.append(blog["_id"])
    return stats


class ReconciliationService:
    def __init__(self, content_store: ContentStore, identity_store: IdentityStore):
        self.content_store = content_store
        self.identity_store = identity_store

    async def reconcile_user(self, user_id: ObjectId, dry_run: bool = False) -> bool:
        """
        Bring one user's counters in line with their blogs.

        Returns:
            bool: `True` if the stored values differed (and, unless `dry_run`, were corrected).
        """
        blogs = await self.content_store.find_by_author(user_id)
        stats = compute_author_stats(blogs)

        current = await self.identity_store.find_by_id(user_id, {"account_info": 1, "blogs": 1})
        if current is None:
            return False

        account_info = current.get("account_info") or {}
        in_sync = (
            account_info.get("total_posts", 0) == stats.total_posts
            and account_info.get("total_reads", 0) == stats.total_reads
            and list(current.get("blogs") or []) == stats.blogs
        )
        if in_sync:
            return False

        logger.info(
            f"User {user_id} drifted: posts {account_info.get('total_posts', 0)} -> {stats.total_posts}, "
            f"reads {account_info.get('total_reads', 0)} -> {stats.total_reads}"
        )
        if not dry_run:
            await self.identity_store.set_account_counters(user_id, stats.total_posts, stats.total_reads, stats.blogs)
            blog_metrics.record_reconciled_user()
        return True

    async def reconcile_all(self, dry_run: bool = False) -> ReconciliationReport:
        """Run `reconcile_user` for every user. A failing user is reported and skipped."""
        report = ReconciliationReport()
        async for user_id in self.identity_store.iter_user_ids():
            report.users_scanned += 1
            try:
                if await self.reconcile_user(user_id, dry_run=dry_run):
                    report.users_corrected += 1
            except DependencyError as e:
                logger.error(f"Reconciliation failed for user {user_id}: {e}")
                report.failures.append(str(user_id))

        logger.info(
            f"Reconciliation finished: scanned={report.users_scanned} corrected={report.users_corrected} "
            f"failed={len(report.failures)} dry_run={dry_run}"
        )
        return report
