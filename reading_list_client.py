"""Reading list API client.

This module defines a client wrapper around the reading list REST
service.  Every request carries a bearer token obtained from an OAuth2
identity provider using the client-credentials grant.  Tokens are held
by a :class:`TokenCache` owned by the client, reused until they come
within a fixed margin of expiry and then refreshed.

The client exposes high-level methods for the operations the reading
list application needs:

* :meth:`ReadingListClient.list_books` – return every book as a list.
* :meth:`ReadingListClient.get_book` – fetch a single book by id.
* :meth:`ReadingListClient.add_book` – add a book.
* :meth:`ReadingListClient.update_status` – change a book's status.
* :meth:`ReadingListClient.delete_book` – remove a book.
* :meth:`ReadingListClient.health` – check that the service is up.

Like the rest of the client code, the methods do not raise on HTTP
failures.  They return a ``(data, error)`` tuple where ``error`` is
``None`` on success, or a dictionary with ``status_code`` and
``message`` keys describing the failure.

Configuration is read from the environment by
:meth:`ClientSettings.from_env`:

``READING_LIST_API_URL``
    Base URL of the service, e.g. ``https://host/reading-list``.
``READING_LIST_TOKEN_URL``
    Token endpoint of the identity provider.
``READING_LIST_CONSUMER_KEY`` / ``READING_LIST_CONSUMER_SECRET``
    Client credentials registered with the identity provider.
``READING_LIST_TIMEOUT``
    Optional request timeout in seconds (default 15).
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

# Tokens are refreshed once they are this close to expiry.
TOKEN_EXPIRY_MARGIN_SECONDS = 5 * 60
DEFAULT_TIMEOUT_SECONDS = 15.0


class ClientConfigurationError(RuntimeError):
    """Raised when the client is missing required configuration."""


class TokenError(RuntimeError):
    """Raised when an access token cannot be obtained."""


@dataclass
class ClientSettings:
    """Connection settings for the reading list client."""

    api_url: Optional[str] = None
    token_url: Optional[str] = None
    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "ClientSettings":
        timeout = os.getenv("READING_LIST_TIMEOUT")
        return cls(
            api_url=os.getenv("READING_LIST_API_URL") or None,
            token_url=os.getenv("READING_LIST_TOKEN_URL") or None,
            consumer_key=os.getenv("READING_LIST_CONSUMER_KEY") or None,
            consumer_secret=os.getenv("READING_LIST_CONSUMER_SECRET") or None,
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT_SECONDS,
        )

    def missing(self) -> List[str]:
        """Return the names of required settings that are not set."""
        names = ("api_url", "token_url", "consumer_key", "consumer_secret")
        return [name for name in names if not getattr(self, name)]


class TokenCache:
    """Access token obtained through the client-credentials grant.

    The cache stores the current token and the absolute time at which
    it expires.  :meth:`get_token` returns the cached token while it is
    valid and transparently refreshes it otherwise.

    Args:
        token_url: Token endpoint of the identity provider.
        consumer_key: OAuth client id.
        consumer_secret: OAuth client secret.
        session: Optional requests session used for token calls.
        margin: Seconds before expiry at which the token counts as stale.
        clock: Callable returning the current time in seconds.
    """

    def __init__(
        self,
        *,
        token_url: Optional[str],
        consumer_key: Optional[str],
        consumer_secret: Optional[str],
        session: Optional[requests.Session] = None,
        margin: float = TOKEN_EXPIRY_MARGIN_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.token_url = token_url
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.session = session or requests.Session()
        self.margin = margin
        self.timeout = timeout
        self.clock = clock
        self.access_token: Optional[str] = None
        self.expires_at: float = 0.0

    def is_valid(self, now: Optional[float] = None) -> bool:
        """Return whether the cached token outlives the expiry margin."""
        if not self.access_token:
            return False
        now = self.clock() if now is None else now
        return self.expires_at > now + self.margin

    def invalidate(self) -> None:
        self.access_token = None
        self.expires_at = 0.0

    def refresh(self) -> str:
        """Fetch a new token from the identity provider and cache it.

        Raises:
            ClientConfigurationError: token URL or credentials are missing.
            TokenError: the identity provider did not issue a token.
        """
        if not self.token_url or not self.consumer_key or not self.consumer_secret:
            raise ClientConfigurationError(
                "OAuth configuration is missing. Please check token URL, consumer key and consumer secret."
            )
        now = self.clock()
        try:
            response = self.session.post(
                self.token_url,
                data={"grant_type": "client_credentials"},
                auth=(self.consumer_key, self.consumer_secret),
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Failed to obtain access token: %s", exc)
            raise TokenError(f"Failed to obtain access token: {exc}") from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            logger.error("Token response did not contain an access token")
            raise TokenError("Token response did not contain an access token")
        try:
            expires_in = float(payload.get("expires_in") or 0)
        except (TypeError, ValueError):
            expires_in = 0.0

        self.access_token = token
        self.expires_at = now + expires_in
        logger.debug("Obtained access token valid for %.0f seconds", expires_in)
        return token

    def get_token(self) -> str:
        if self.is_valid():
            return self.access_token  # type: ignore[return-value]
        return self.refresh()


class ReadingListClient:
    """Client for interacting with the reading list service.

    Args:
        base_url: Base URL for the service including the
            ``/reading-list`` prefix, e.g. ``https://example.com/reading-list``.
        token_cache: Source of bearer tokens.  When ``None`` requests are
            sent without an ``Authorization`` header.
        session: Optional requests session.  If not supplied a session
            will be created automatically.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        *,
        base_url: str,
        token_cache: Optional[TokenCache] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token_cache = token_cache
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "ReadingListClient":
        """Build a client and its token cache from ``settings``.

        Raises:
            ClientConfigurationError: a required setting is missing.
        """
        missing = settings.missing()
        if missing:
            raise ClientConfigurationError(
                "Missing reading list client configuration: " + ", ".join(missing)
            )
        session = requests.Session()
        token_cache = TokenCache(
            token_url=settings.token_url,
            consumer_key=settings.consumer_key,
            consumer_secret=settings.consumer_secret,
            session=session,
            timeout=settings.timeout,
        )
        return cls(
            base_url=settings.api_url,  # type: ignore[arg-type]
            token_cache=token_cache,
            session=session,
            timeout=settings.timeout,
        )

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request to the service.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to :attr:`base_url` (e.g. ``/books``).
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        try:
            if self.token_cache is not None:
                headers["Authorization"] = f"Bearer {self.token_cache.get_token()}"
        except TokenError as exc:
            return None, {"status_code": None, "message": str(exc)}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("detail") or str(err_json)
                except (ValueError, AttributeError):
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            if status == 401 and self.token_cache is not None:
                # Rejected token: fetch a new one on the next call.
                self.token_cache.invalidate()
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}
        except ValueError as exc:
            # Successful status but a body that is not JSON.
            logger.error("API returned an unreadable response: %s", exc)
            return None, {"status_code": None, "message": f"Invalid response from server: {exc}"}

    # ------------------------------------------------------------------
    # Book operations
    # ------------------------------------------------------------------
    def list_books(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve every book.

        The service answers with a mapping of id to record; it is turned
        into a list here, with each record guaranteed to carry its id.

        Returns:
            A tuple ``(books, error)``.  ``books`` is empty on failure.
        """
        data, error = self._request("GET", "/books")
        if error:
            return [], error
        if isinstance(data, dict):
            return [{**record, "id": book_id} for book_id, record in data.items()], None
        if isinstance(data, list):
            return data, None
        return [], None

    def get_book(self, book_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("GET", f"/books/{book_id}")

    def add_book(
        self, title: str, author: str, status: str
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Add a book.

        Returns:
            A tuple ``(book, error)`` where ``book`` is the created record.
        """
        payload = {"title": title, "author": author, "status": status}
        return self._request("POST", "/books", json_body=payload)

    def update_status(
        self, book_id: str, status: str
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._request("PUT", f"/books/{book_id}", json_body={"status": status})

    def delete_book(self, book_id: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Delete a book.

        Returns:
            A tuple ``(success, error)``.
        """
        data, error = self._request("DELETE", f"/books/{book_id}")
        if error:
            return False, error
        return data is not None, None

    def health(self, health_url: Optional[str] = None) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Call the service's liveness endpoint.

        The endpoint lives at the server root, so by default the
        ``/reading-list`` suffix is stripped from :attr:`base_url`.
        """
        if health_url is None:
            root = self.base_url
            if root.endswith("/reading-list"):
                root = root[: -len("/reading-list")]
            health_url = f"{root}/healthz"
        try:
            response = self.session.get(health_url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Health check failed: %s", exc)
            return False, {"status_code": None, "message": str(exc)}
        if response.status_code != 200:
            return False, {"status_code": response.status_code, "message": response.text or "unhealthy"}
        return True, None
