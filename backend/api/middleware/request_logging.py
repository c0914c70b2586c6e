"""
Request logging middleware - one access-log line per sampled request.

The line carries the envelope's responseStatus and, for gate rejections, the
offending field names, so a 400 can be attributed without a body dump:

    api_request path=/employees method=GET status=400
        response_status=ERR_INVALID_QUERY_PARAMS fields=employeePage ...

Env vars (read when the app is built):
  - REQUEST_LOG_ENABLED      (default: true)
  - REQUEST_LOG_SAMPLE_RATE  (default: 1.0)
  - REQUEST_LOG_ENDPOINTS    (comma-separated path prefixes always logged)
"""

import logging
import os
import random
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from flask import Flask, g, request


logger = logging.getLogger("api.request")


@dataclass(frozen=True)
class RequestLogSettings:
    enabled: bool = True
    sample_rate: float = 1.0
    always_log: Tuple[str, ...] = ()

    @classmethod
    def from_env(cls) -> "RequestLogSettings":
        try:
            sample_rate = float(os.environ.get("REQUEST_LOG_SAMPLE_RATE", "1.0"))
        except ValueError:
            sample_rate = 0.0
        prefixes = os.environ.get("REQUEST_LOG_ENDPOINTS", "")
        return cls(
            enabled=os.environ.get("REQUEST_LOG_ENABLED", "true").lower() == "true",
            sample_rate=sample_rate,
            always_log=tuple(p.strip() for p in prefixes.split(",") if p.strip()),
        )

    def should_log(self, path: str) -> bool:
        if self.always_log and path.startswith(self.always_log):
            return True
        return self.sample_rate >= 1 or random.random() < self.sample_rate


def _envelope_summary(response) -> Tuple[Optional[str], str]:
    """(responseStatus, comma-joined missing/invalid field names) of a JSON body."""
    body = response.get_json(silent=True) if response.is_json else None
    if not isinstance(body, dict):
        return None, "-"
    fields = body.get("missingParams") or body.get("invalidParams") or []
    return body.get("responseStatus"), ",".join(fields) or "-"


def setup_request_logging_middleware(app: Flask) -> None:
    settings = RequestLogSettings.from_env()
    if not settings.enabled:
        return

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not settings.should_log(request.path):
            return response

        started = getattr(g, "request_start", None)
        duration_ms = round((time.perf_counter() - started) * 1000, 2) if started is not None else None
        response_status, fields = _envelope_summary(response)

        # 5xx at WARNING
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "api_request path=%s method=%s status=%s response_status=%s fields=%s "
            "duration_ms=%s request_id=%s",
            request.path,
            request.method,
            response.status_code,
            response_status,
            fields,
            duration_ms,
            getattr(g, "request_id", None),
        )
        return response
