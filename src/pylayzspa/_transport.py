"""HTTP transport for the Gizwits cloud API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pylayzspa._constants import CONTENT_TYPE, HEADER_APPLICATION_ID, HEADER_USER_TOKEN
from pylayzspa._redact import redact_for_log
from pylayzspa.config import LayzConfig
from pylayzspa.exceptions import LayzContractError, LayzRemoteRejectedError, LayzTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def request_json(
        self,
        method: str,
        endpoint: str,
        body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        ...


def build_headers(config: LayzConfig) -> dict[str, str]:
    """Authentication headers sent with every request."""
    return {
        "Content-Type": CONTENT_TYPE,
        HEADER_USER_TOKEN: config.api_token,
        HEADER_APPLICATION_ID: config.application_id,
    }


class HttpTransport:
    """Stateless JSON-over-HTTP transport.

    Each call is authenticated on its own; no cookies or session tokens are
    carried between requests.
    """

    def __init__(self, config: LayzConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def request_json(
        self,
        method: str,
        endpoint: str,
        body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON object.

        An empty response body decodes to ``{}`` (control endpoints answer
        with no content on success).
        """
        headers = build_headers(self._config)
        url = f"{self._config.base_url}{endpoint}"
        data = json.dumps(dict(body), separators=(",", ":")) if body is not None else None

        _logger.debug("%s %s headers=%s body=%s", method, url, redact_for_log(headers), redact_for_log(body))

        try:
            async with self._http.request(method, url, data=data, headers=headers) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise LayzRemoteRejectedError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except LayzRemoteRejectedError:
            raise
        except UnicodeDecodeError as exc:
            raise LayzContractError(
                f"Undecodable response body from {endpoint}: {exc}",
                endpoint=endpoint,
            ) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise LayzTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return {}

        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise LayzContractError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(decoded, dict):
            raise LayzContractError(
                f"Expected a JSON object from {endpoint}, got {type(decoded).__name__}",
                endpoint=endpoint,
            )
        return decoded
