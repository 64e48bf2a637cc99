"""
AI insight generation function gateway.

All outbound HTTP calls to the external insight generator go through this
class. Direct `requests` calls in services or blueprints are FORBIDDEN.

The generator is a hosted serverless function:
  - POST {} to INSIGHTS_FUNCTION_URL (bearer INSIGHTS_FUNCTION_KEY) starts a
    generation pass. It may answer with ``{"run_id": ...}``.
  - GET INSIGHTS_STATUS_URL (template with ``{run_id}``) reports
    ``{"status": "pending|running|completed|failed", "error": ...}``.

No retries here: a failed call is reported once and the service decides
what the user sees.

Testability: pass a fake `session` to InsightGateway() in tests instead of
letting it create a real requests.Session internally.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 60


class GatewayResult:
    """Structured return value from InsightGateway calls.

    Attributes:
        ok:           True if the call succeeded (HTTP 2xx, no error in body).
        status_code:  HTTP status code (None if network-level failure).
        data:         Parsed JSON response body, else None.
        error:        Raw error text or None.
        duration_ms:  Round-trip latency in milliseconds.
    """

    def __init__(
        self,
        ok: bool,
        status_code: int | None,
        data: dict | None,
        error: str | None,
        duration_ms: int,
    ) -> None:
        self.ok = ok
        self.status_code = status_code
        self.data = data
        self.error = error
        self.duration_ms = duration_ms

    @property
    def run_id(self) -> str | None:
        if not self.data:
            return None
        value = self.data.get("run_id") or self.data.get("runId")
        return str(value) if value else None

    def __repr__(self) -> str:
        return f"<GatewayResult ok={self.ok} status={self.status_code} error={self.error!r}>"


class InsightGateway:
    """HTTP client for the insight generation function.

    Usage:
        gateway = InsightGateway.from_config(current_app.config)
        result = gateway.invoke()
        if result.run_id:
            status = gateway.get_run_status(result.run_id)
    """

    def __init__(
        self,
        function_url: str,
        function_key: str = "",
        *,
        status_url: str = "",
        timeout: int = _DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.function_url = function_url
        self.function_key = function_key
        self.status_url = status_url
        self.timeout = timeout
        self._session: requests.Session | None = session

    @classmethod
    def from_config(cls, config: Any, session: requests.Session | None = None) -> "InsightGateway":
        return cls(
            config.get("INSIGHTS_FUNCTION_URL", ""),
            config.get("INSIGHTS_FUNCTION_KEY", ""),
            status_url=config.get("INSIGHTS_STATUS_URL", ""),
            timeout=config.get("INSIGHTS_TIMEOUT", _DEFAULT_TIMEOUT),
            session=session,
        )

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    @property
    def supports_polling(self) -> bool:
        return bool(self.status_url)

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.function_key:
            headers["Authorization"] = f"Bearer {self.function_key}"
        return headers

    def _call(self, method: str, url: str, json_body: dict | None = None) -> GatewayResult:
        if not url:
            return GatewayResult(False, None, None, "Insight function URL is not configured", 0)

        t0 = time.perf_counter()
        try:
            resp = self.session.request(
                method, url, headers=self._headers(), json=json_body, timeout=self.timeout,
            )
        except requests.Timeout:
            logger.warning("Insight function timed out url=%s", url)
            return GatewayResult(False, None, None,
                                 f"Request timeout after {self.timeout}s",
                                 int(self.timeout * 1000))
        except requests.RequestException as exc:
            logger.warning("Insight function network error url=%s error=%s", url, exc)
            return GatewayResult(False, None, None, str(exc)[:500], 0)

        duration_ms = int((time.perf_counter() - t0) * 1000)
        try:
            data = resp.json() if resp.content else {}
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {"result": data}

        if not resp.ok:
            error = data.get("error") or data.get("message") or f"HTTP {resp.status_code}: {resp.text[:500]}"
            logger.warning("Insight function failed status=%d url=%s", resp.status_code, url)
            return GatewayResult(False, resp.status_code, data, str(error), duration_ms)
        if data.get("error"):
            return GatewayResult(False, resp.status_code, data, str(data["error"]), duration_ms)
        return GatewayResult(True, resp.status_code, data, None, duration_ms)

    def invoke(self) -> GatewayResult:
        """Start one generation pass. The function takes an empty payload."""
        logger.info("Invoking insight generation function")
        return self._call("POST", self.function_url, json_body={})

    def get_run_status(self, run_id: str) -> GatewayResult:
        """Read the status of a run started by invoke()."""
        return self._call("GET", self.status_url.format(run_id=run_id))
