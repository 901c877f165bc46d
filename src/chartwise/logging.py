"""Process-wide logger with a per-process session id."""
from __future__ import annotations

import logging
import os
import sys
import uuid

_SESSION_ID = uuid.uuid4().hex[:12]

_FORMAT = "%(asctime)s %(levelname)s [%(session_id)s] %(name)s: %(message)s"


class _SessionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _SESSION_ID
        return True


def get_session_id() -> str:
    """Return the id stamped on every log line from this process."""
    return _SESSION_ID


def _configure() -> logging.Logger:
    root = logging.getLogger("chartwise")
    if root.handlers:
        return root
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.addFilter(_SessionFilter())
    root.addHandler(handler)
    root.setLevel(os.environ.get("CHARTWISE_LOG_LEVEL", "INFO").upper())
    root.propagate = False
    return root


logger = _configure()
