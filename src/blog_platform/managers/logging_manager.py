"""
# Logging Manager

Central place where application loggers are created.

Every module obtains its logger through `get_logger()`, optionally with a bracketed prefix that
identifies the component in the log stream:

```python
from blog_platform.managers.logging_manager import get_logger

logger = get_logger(prefix="[PublishingService]")
logger.info("Published blog %s", blog_id)
# 2024-01-15 10:30:00,123 | INFO | blog_platform | [PublishingService] Published blog ...
```

The root handler is installed once, on first use, at the level configured by `LOG_LEVEL`.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional, Tuple

from blog_platform.config import settings

LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LOGGER_NAME: str = "blog_platform"

_configured: bool = False


class PrefixedLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that prepends a fixed prefix to every message."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        prefix = self.extra.get("prefix") if self.extra else None
        if prefix:
            return f"{prefix} {msg}", kwargs
        return msg, kwargs


def _configure_root() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger(DEFAULT_LOGGER_NAME)
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root.propagate = False
    _configured = True


def get_logger(name: str = DEFAULT_LOGGER_NAME, prefix: Optional[str] = None) -> PrefixedLoggerAdapter:
    """
    Return a logger for the given name, optionally prefixing every message.

    Args:
        name (str): Logger name. Children of `blog_platform` share the configured handler.
        prefix (Optional[str]): Text such as `"[DATABASE]"` prepended to each message.

    Returns:
        PrefixedLoggerAdapter: Adapter exposing the usual `debug/info/warning/error` API.
    """
    _configure_root()
    return PrefixedLoggerAdapter(logging.getLogger(name), {"prefix": prefix})
