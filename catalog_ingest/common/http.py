"""HTTP client with bounded timeouts and a selectable TLS transport."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Any

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from catalog_ingest.common.constants import DEFAULT_TIMEOUT_SECONDS, TRANSPORTS, USER_AGENT
from catalog_ingest.common.errors import ConfigError, DecodeError, SourceUnavailable


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = DEFAULT_TIMEOUT_SECONDS
    read: float = DEFAULT_TIMEOUT_SECONDS


class HttpClient:
    """Thin requests wrapper.

    ``transport="insecure"`` disables certificate verification; the geoportal
    endpoint does not present a verifiable chain. Use ``"verified"`` anywhere
    that can.
    """

    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        transport: str = "verified",
    ) -> None:
        if transport not in TRANSPORTS:
            raise ConfigError(f"Unknown transport {transport!r}, expected one of: {', '.join(TRANSPORTS)}")
        self.timeout = timeout or TimeoutConfig()
        self.transport = transport
        self.session = requests.Session()
        self.session.verify = transport == "verified"
        if not self.session.verify:
            urllib3.disable_warnings(InsecureRequestWarning)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if headers:
            out.update(headers)
        return out

    def get_json(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        req_timeout = timeout or self.timeout
        try:
            response = self.session.request(
                method="GET",
                url=url,
                headers=self._headers(headers),
                timeout=(req_timeout.connect, req_timeout.read),
                verify=self.session.verify,
            )
        except requests.RequestException as exc:
            raise SourceUnavailable(f"GET {url} failed: {exc}") from exc

        if response.status_code != 200:
            raise SourceUnavailable(
                f"GET {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON payload from {url}") from exc
