"""
Where: services/catalog/core/access_log.py
What: Structured access records for every request.
Why: One entry and one exit record per request, without ever failing the request.
"""

import json
import logging
import sys
from typing import Optional

from starlette.responses import Response

from ..models import RequestContext

logger = logging.getLogger("catalog.access")


class AccessLogger:
    """Writes entry/exit records to the catalog.access logger."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def record_entry(self, context: RequestContext) -> None:
        try:
            self.log.info(
                f"--> {context.method} {context.path}",
                extra={
                    "event": "request.entry",
                    "method": context.method,
                    "path": context.path,
                    "user_agent": context.headers.get("user-agent"),
                },
            )
        except Exception as e:
            self._fallback("request.entry", context, e)

    def record_exit(self, context: RequestContext, response: Response, elapsed: float) -> None:
        try:
            extra = {
                "event": "request.exit",
                "method": context.method,
                "path": context.path,
                "status": response.status_code,
                "latency_ms": round(elapsed * 1000, 2),
            }
            error = context.get("error")
            if error:
                extra["error_message"] = error
            self.log.info(
                f"{context.method} {context.path} {response.status_code}",
                extra=extra,
            )
        except Exception as e:
            self._fallback("request.exit", context, e)

    @staticmethod
    def _fallback(event: str, context: RequestContext, error: Exception) -> None:
        # Use sys.__stderr__ so a broken logging setup cannot loop back here.
        stream = getattr(sys, "__stderr__", None) or sys.stderr
        try:
            stream.write(
                json.dumps(
                    {
                        "fallback": "access_log_failed",
                        "event": event,
                        "method": context.method,
                        "path": context.path,
                        "error": str(error),
                    }
                )
                + "\n"
            )
        except Exception:
            pass  # Prevent app from crashing in worst case.
