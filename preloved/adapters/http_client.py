"""Shared HTTP transport utilities for REST adapters.

This module provides a thin wrapper around ``requests.Session`` so adapter
implementations share timeout policy, the attempt loop, and bearer-token
header construction.

Dependencies:
    - ``requests`` for network I/O.
    - ``preloved.adapters.api_errors.ApiTimeoutError`` for typed transport
      failures.

Call context:
    - Constructed once by ``preloved.app.controller.AppController`` and shared
      by every REST adapter.
    - The bearer token is pulled from the ``TokenSource`` each time headers are
      built, so a login/logout between two requests affects only requests
      issued afterwards.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

import requests
from requests import exceptions as req_exc

from preloved.adapters.api_errors import ApiError, ApiTimeoutError
from preloved.domain.ports import TokenSource


@dataclass
class HttpConfig:
    """Timeout and attempt configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Default timeout in seconds for JSON API calls.
        upload_timeout_s: Timeout in seconds for image uploads.
        retries: Extra attempts after a transport failure. The storefront
            never retries on its own, so this stays ``0`` unless a caller
            opts in explicitly.
    """

    request_timeout_s: float = 10
    upload_timeout_s: float = 60
    retries: int = 0


class ApiSession:
    """Shared requests wrapper that attaches ``Authorization: Bearer``.

    This class is transport-only. Callers provide endpoint URLs and decide how
    to map non-2xx responses into domain/use-case errors.
    """

    def __init__(
        self,
        cfg: Optional[HttpConfig] = None,
        *,
        token_source: Optional[TokenSource] = None,
        session_factory: Callable[[], Any] = requests.Session,
    ) -> None:
        """Create a session bound to a token source.

        Args:
            cfg: Shared timeout and attempt settings.
            token_source: Object whose ``current_token()`` returns the bearer
                token, or ``None`` for anonymous calls.
            session_factory: Factory for the underlying ``requests.Session``.
        """
        self._log = logging.getLogger(__name__)
        self.cfg = cfg or HttpConfig()
        self.token_source = token_source
        self.session = session_factory()

    def _headers(self, *, json_body: bool = False, auth: bool = True) -> Dict[str, str]:
        """Build request headers, reading the token at call time."""
        headers = {"Accept": "application/json"}
        if auth and self.token_source is not None:
            token = self.token_source.current_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        timeout: Optional[float] = None,
        auth: bool = True,
    ) -> requests.Response:
        """Send one request; retry only on timeout/connectivity failures.

        Raises:
            ApiTimeoutError: If every attempt fails at the transport level.
            ApiError: For any other ``requests`` failure.
        """
        context = f"{method} {url}"
        data = None if json_body is None else json.dumps(json_body)
        attempts = max(0, int(self.cfg.retries)) + 1
        last_err: Optional[ApiError] = None
        for attempt in range(attempts):
            try:
                if self._log.isEnabledFor(logging.DEBUG):
                    self._log.debug("%s (attempt %d/%d)", context, attempt + 1, attempts)
                return self.session.request(
                    method,
                    url,
                    params=dict(params) if params else None,
                    data=data,
                    headers=self._headers(json_body=json_body is not None, auth=auth),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError):
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
            except req_exc.RequestException as exc:
                raise ApiError(str(exc), context=context) from exc
        assert last_err is not None
        raise last_err

    def get(self, url: str, *, params: Optional[Mapping[str, Any]] = None, auth: bool = True) -> requests.Response:
        return self.request("GET", url, params=params, auth=auth)

    def post(
        self, url: str, *, json_body: Any = None, timeout: Optional[float] = None, auth: bool = True
    ) -> requests.Response:
        return self.request("POST", url, json_body=json_body, timeout=timeout, auth=auth)

    def put(self, url: str, *, json_body: Any = None) -> requests.Response:
        return self.request("PUT", url, json_body=json_body)

    def delete(self, url: str) -> requests.Response:
        return self.request("DELETE", url)


__all__ = ["ApiSession", "HttpConfig"]
