"""
HTTP transport that executes list queries against a SharePoint server using
Basic authentication.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from http.client import HTTPException
from typing import Callable, Protocol
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from sharepoint_bridge.exceptions import SharePointConnectionError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class BasicAuthCredentials:
    """Username and password sent with every request."""

    username: str
    password: str = field(repr=False)


class Transport(Protocol):
    def execute(self, url: str) -> str: ...


def build_auth_header(username: str, password: str) -> str:
    """Return the value of the ``Authorization`` header for Basic auth."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8"))
    return f"Basic {token.decode('ascii')}"


class HttpTransport:
    """Issues authenticated GET requests and returns the decoded body."""

    def __init__(
        self,
        credentials: BasicAuthCredentials,
        *,
        request_func: Callable[..., object] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._credentials = credentials
        self._request = request_func or urlopen
        self._timeout = timeout

    def build_request(self, url: str) -> Request:
        return Request(
            url,
            headers={
                "Authorization": build_auth_header(
                    self._credentials.username, self._credentials.password
                ),
                "Content-Type": "application/json",
            },
            method="GET",
        )

    def execute(self, url: str) -> str:
        """Run a GET against ``url`` and return the response body as text."""
        try:
            request = self.build_request(url)
        except ValueError as exc:
            logger.error(f"Invalid SharePoint query URL {url}: {exc}")
            raise SharePointConnectionError(url=url) from exc
        logger.debug(f"Executing SharePoint query: {url}")
        status, body = self._send(request)
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.error(f"SharePoint response from {url} is not valid UTF-8: {exc}")
            raise SharePointConnectionError(
                status_code=status, url=url
            ) from exc

    def _send(self, request: Request) -> tuple[int, bytes]:
        """Send an HTTP request and return status code and body."""
        response = None
        try:
            response = self._request(request, timeout=self._timeout)
            status = getattr(response, "status", None)
            if status is None:
                status = response.getcode()
            body = response.read()
        except HTTPError as exc:
            logger.error(
                f"SharePoint query request failed with status {exc.code}: "
                f"{request.full_url}"
            )
            raise SharePointConnectionError(
                status_code=exc.code, url=request.full_url
            ) from exc
        except (OSError, HTTPException) as exc:
            logger.error(
                f"SharePoint query request failed due to network error: {exc!r} "
                f"({request.full_url})"
            )
            raise SharePointConnectionError(url=request.full_url) from exc
        finally:
            if response is not None:
                try:
                    response.close()
                except Exception:
                    pass

        if status is None or not (200 <= status < 300):
            logger.error(
                f"SharePoint query request returned status {status}: "
                f"{request.full_url}"
            )
            raise SharePointConnectionError(status_code=status, url=request.full_url)
        return status, body
