"""
Thin wrapper around ``requests`` that adds logging,
retries and unified error handling.

The :class:`HttpRequester` class is used by the store client to communicate
with Cloudant.  It centralises:

* construction of absolute URLs from a base URL,
* automatic inclusion of a bearer token obtained from a token provider,
* a configurable retry policy via ``urllib3.Retry``,
* conversion of HTTP error codes and transport failures into the
  library‑specific exception hierarchy (:class:`AuthenticationError`,
  :class:`RateLimitError`, :class:`StoreError`).

All methods return the raw ``requests.Response`` object after the response has
been validated by ``_handle_response``.
"""

import logging
from typing import Any, Callable, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from cloudant_output_lib.exceptions import (
    AuthenticationError,
    RateLimitError,
    StoreError,
)

TokenProvider = Callable[[], str]


class HttpRequester:
    """
    Helper for making HTTP calls with built‑in retries and error translation.

    Parameters
    ----------
    base_url : str
        Base URL of the remote service (e.g. ``"https://acct.cloudant.com"``).
        A trailing slash is stripped automatically.
    token_provider : Optional[Callable[[], str]]
        Called before every request to obtain a bearer token for the
        ``Authorization`` header; if ``None``, no header is added.
    timeout : int, default ``10``
        Per‑request timeout in seconds.
    retries : int, default ``2``
        Number of retry attempts for transient failures (status codes in
        ``status_forcelist``).  The back‑off factor is ``0.5`` seconds.
    logger : Optional[logging.Logger]
        Logger instance; if omitted, a module‑level logger is created.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout: int = 10,
        retries: int = 2,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_provider = token_provider
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

        self.logger = logger or logging.getLogger(__name__)

        # retry‑policy
        retry_strategy = Retry(
            total=retries,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "POST", "PUT", "DELETE"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def _full_url(self, path: str) -> str:
        """
        Build the absolute URL for a request.

        Parameters
        ----------
        path : str
            URL path to be appended to ``self.base_url``.  The method ensures
            exactly one ``/`` separates the base and the path.

        Returns
        -------
        str
            Fully qualified URL.
        """
        return f"{self.base_url}{path if path.startswith('/') else '/' + path}"

    def _auth_headers(self) -> Dict[str, str]:
        if self.token_provider is None:
            return {}
        return {"Authorization": f"Bearer {self.token_provider()}"}

    @staticmethod
    def _handle_response(resp: requests.Response) -> requests.Response:
        """
        Translate HTTP error codes into library‑specific exceptions.

        The method examines ``resp.status_code`` and raises:

        * :class:`AuthenticationError` for ``401 Unauthorized`` and
          ``403 Forbidden``.
        * :class:`RateLimitError` for ``429 Too Many Requests``.
        * :class:`StoreError` for any other 4xx/5xx status.

        If the response is successful, it is returned unchanged.

        Raises
        ------
        AuthenticationError
            When the server returns ``401`` or ``403``.
        RateLimitError
            When the server returns ``429``.
        StoreError
            For any other client or server error (status code 4xx/5xx).
        """
        if resp.status_code in (401, 403):
            raise AuthenticationError(
                f"HTTP {resp.status_code}: invalid or missing credentials"
            )
        if resp.status_code == 429:
            raise RateLimitError("Rate limit exceeded")
        if 400 <= resp.status_code < 600:
            raise StoreError(f"HTTP {resp.status_code}: {resp.text}")
        return resp

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self._full_url(path)
        headers = self._auth_headers()
        headers.update(kwargs.pop("headers", None) or {})
        try:
            resp = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as exc:
            raise StoreError(f"{method} {url} failed: {exc}") from exc
        return self._handle_response(resp)

    def get(self, path: str, **kwargs) -> requests.Response:
        """
        Perform a ``GET`` request.

        Parameters
        ----------
        path : str
            Relative URL path that will be combined with the base URL.
        **kwargs
            Additional arguments forwarded to ``requests.Session.request``.

        Returns
        -------
        requests.Response
            The validated response object.
        """
        self.logger.debug("GET %s", self._full_url(path))
        return self._request("GET", path, **kwargs)

    def post(
        self, path: str, json: Optional[Dict[str, Any]] = None, **kwargs
    ) -> requests.Response:
        """
        Perform a ``POST`` request with a JSON body.

        Parameters
        ----------
        path : str
            Relative URL path to post to.
        json : Optional[Dict[str, Any]]
            JSON‑serialisable payload sent as the request body.
        **kwargs
            Additional arguments forwarded to ``requests.Session.request``.

        Returns
        -------
        requests.Response
            The validated response object.
        """
        self.logger.debug("POST %s | payload=%s", self._full_url(path), json)
        return self._request("POST", path, json=json, **kwargs)

    def close(self) -> None:
        self.session.close()
