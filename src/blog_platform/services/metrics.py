"""
# Blog Metrics

**Prometheus metrics** for the Blog Platform core.

HTTP latency and status codes come from `prometheus-fastapi-instrumentator` in `main.py`; the
counters here cover domain events the HTTP layer cannot see:

- **Publications** by draft flag.
- **Reads** recorded on blogs.
- **Auth attempts** by method (`password`, `google`, `sign_up`) and outcome.
- **Secondary update failures**: the best-effort user counter updates that follow a committed
  blog write (`publish`, `read`). A non-zero rate means `account_info` is drifting and the
  reconciliation CLI should be run.

## Usage Example

```python
blog_metrics.record_publication(draft=False)
blog_metrics.record_secondary_failure("publish")
```
"""

from prometheus_client import Counter

from blog_platform.managers.logging_manager import get_logger

logger = get_logger(prefix="[BlogMetrics]")


class BlogMetrics:
    """Counters for publishing, reading and authentication."""

    def __init__(self):
        self.publications_total = Counter(
            "blog_publications_total",
            "Total number of blogs created",
            ["draft"],
        )

        self.reads_total = Counter(
            "blog_reads_total",
            "Total number of blog reads recorded",
        )

        self.auth_attempts_total = Counter(
            "blog_auth_attempts_total",
            "Total number of sign-up and sign-in attempts",
            ["method", "outcome"],
        )

        self.secondary_update_failures = Counter(
            "blog_secondary_update_failures_total",
            "Best-effort user counter updates that failed after the blog write committed",
            ["operation"],
        )

        self.reconciled_users_total = Counter(
            "blog_reconciled_users_total",
            "Users whose counters were corrected by a reconciliation pass",
        )

        logger.info("Blog metrics initialized")

    def record_publication(self, draft: bool):
        self.publications_total.labels(draft=str(draft).lower()).inc()

    def record_read(self):
        self.reads_total.inc()

    def record_auth_attempt(self, method: str, outcome: str):
        self.auth_attempts_total.labels(method=method, outcome=outcome).inc()

    def record_secondary_failure(self, operation: str):
        """Count a failed counter/list update on the author after a committed blog write."""
        self.secondary_update_failures.labels(operation=operation).inc()

    def record_reconciled_user(self):
        self.reconciled_users_total.inc()


# Global metrics instance
blog_metrics = BlogMetrics()
