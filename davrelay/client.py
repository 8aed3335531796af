import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

DAV_METHODS = ("PROPFIND", "PROPPATCH", "MKCOL", "COPY", "MOVE", "LOCK", "UNLOCK", "GET", "PUT", "DELETE")
DEPTH_VALUES = ("0", "1", "infinity")
DEFAULT_CONTENT_TYPE = "application/xml; charset=utf-8"

class DavRequestError(Exception):
    """A WebDAV request could not be sent or was malformed."""
    pass

@dataclass
class DavResponse:
    """Raw server answer, passed back to the caller uninterpreted."""
    status: int
    reason: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "statusText": self.reason,
            "headers": dict(self.headers),
            "body": self.body,
        }

class DavClient:
    """Forwards WebDAV requests to a single configured server."""

    def __init__(self, server_url: str, username: Optional[str] = None, password: Optional[str] = None,
                 connection_pool_size: int = 10, timeout: Optional[float] = None):
        """Initialize the client.

        Args:
            server_url: Base URL of the WebDAV server (http:// or https://)
            username: Optional username for basic auth
            password: Optional password for basic auth
            connection_pool_size: Size of the connection pool
            timeout: Optional per-request timeout in seconds
        """
        if not server_url:
            raise ValueError("Server URL must be a non-empty string.")
        self.server_url = server_url
        self.timeout = timeout
        self.connection_pool_size = connection_pool_size

        self.session = requests.Session()
        retries = Retry(total=5, backoff_factor=0.1)
        adapter = HTTPAdapter(
            pool_connections=connection_pool_size,
            pool_maxsize=connection_pool_size,
            max_retries=retries
        )
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)
        # Both are needed, a lone username is ignored
        if username and password:
            self.session.auth = (username, password)

    @classmethod
    def from_settings(cls, settings) -> 'DavClient':
        """Create a client from ``davrelay.config.Settings``.

        Raises:
            ConfigError: If no server URL is configured
        """
        return cls(settings.require_server_url(), settings.username, settings.password)

    def build_url(self, path: str) -> str:
        """Resolve a request path against the server URL."""
        return urljoin(self.server_url, path)

    def request(self, method: str, path: str, body: Optional[str] = None,
                headers: Optional[Dict[str, str]] = None, depth: Optional[str] = None) -> DavResponse:
        """Send one WebDAV request.

        Args:
            method: One of DAV_METHODS
            path: Path on the server, relative to the base URL
            body: Optional request body
            headers: Extra headers; they override the default Content-Type
            depth: Optional Depth header value ("0", "1" or "infinity")

        Returns:
            DavResponse with status, headers and body as received

        Raises:
            DavRequestError: On invalid arguments or transport failure
        """
        method = method.upper()
        if method not in DAV_METHODS:
            raise DavRequestError(f"Unsupported method '{method}'. Expected one of: {', '.join(DAV_METHODS)}")
        if depth is not None and depth not in DEPTH_VALUES:
            raise DavRequestError(f"Invalid depth '{depth}'. Expected one of: {', '.join(DEPTH_VALUES)}")

        url = self.build_url(path)
        request_headers = {"Content-Type": DEFAULT_CONTENT_TYPE}
        request_headers.update(headers or {})
        if depth is not None:
            request_headers["Depth"] = depth

        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(
                method,
                url,
                headers=request_headers,
                data=body.encode('utf-8') if body is not None else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise DavRequestError(f"{method} {url} failed: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return DavResponse(
            status=response.status_code,
            reason=response.reason or "",
            headers=dict(response.headers),
            body=response.text,
        )

    def close(self) -> None:
        self.session.close()
