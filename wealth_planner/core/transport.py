"""HTTP plumbing used by the remote scenario store."""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from wealth_planner.errors import TransportError


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decode the body; raises ValueError when it is not JSON."""
        return json.loads(self.body)


class Transport(Protocol):
    def request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        ...


class HttpTransport:
    """Blocking JSON-over-HTTP client.

    Error statuses come back as responses; failures that never yield a complete
    response (DNS, refused connection, timeout, truncated body) raise TransportError.
    """

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        all_headers = {"Accept": "application/json"}
        data = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            all_headers["Content-Type"] = "application/json"
        all_headers.update(headers or {})

        req = urllib.request.Request(
            f"{self.base_url}{path}", data=data, headers=all_headers, method=method
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return TransportResponse(resp.status, resp.read().decode("utf-8", errors="replace"))
        except urllib.error.HTTPError as exc:
            try:
                body = exc.read().decode("utf-8", errors="replace")
            except (http.client.HTTPException, OSError):
                body = ""
            return TransportResponse(exc.code, body)
        # IncompleteRead and friends are HTTPException, not OSError
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc
