"""
Request timing middleware.

Records request duration, stamps every response with
X-Request-Duration-Ms / X-Request-ID and logs slow or failing requests.
A bounded in-memory buffer keeps recent samples for the health endpoint.
"""

import logging
import time
import uuid
from collections import deque

from flask import Flask, g, request

logger = logging.getLogger(__name__)

# High frequency, low value
_SKIP_LOG = frozenset({"/api/v1/health/ready", "/api/v1/health/live"})

SLOW_THRESHOLD_MS = 1000

_samples: deque = deque(maxlen=5_000)


def init_request_timing(app: Flask):
    """Register before/after hooks for request timing."""

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]

    @app.after_request
    def _log_request(response):
        start = getattr(g, "request_start", None)
        if start is None:
            return response

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"
        response.headers["X-Request-ID"] = g.request_id

        _samples.append({
            "ts": time.time(),
            "method": request.method,
            "path": request.path,
            "status": response.status_code,
            "ms": round(duration_ms, 1),
        })

        if request.path in _SKIP_LOG:
            return response

        extra = {
            "method": request.method,
            "path": request.path,
            "status": response.status_code,
            "duration_ms": duration_ms,
            "remote_addr": request.remote_addr,
        }
        if duration_ms > SLOW_THRESHOLD_MS:
            logger.warning("Slow request: %s %s %d (%.0fms)",
                           request.method, request.path,
                           response.status_code, duration_ms, extra=extra)
        elif response.status_code >= 500:
            logger.error("Server error: %s %s %d (%.0fms)",
                         request.method, request.path,
                         response.status_code, duration_ms, extra=extra)
        else:
            logger.debug("Request: %s %s %d (%.0fms)",
                         request.method, request.path,
                         response.status_code, duration_ms, extra=extra)
        return response


def request_summary(seconds: int = 3600) -> dict:
    """Count and p95 latency of requests seen in the last ``seconds``."""
    cutoff = time.time() - seconds
    durations = sorted(s["ms"] for s in _samples if s["ts"] >= cutoff)
    if not durations:
        return {"count": 0, "p95_ms": None}
    idx = min(len(durations) - 1, int(len(durations) * 0.95))
    return {"count": len(durations), "p95_ms": durations[idx]}
