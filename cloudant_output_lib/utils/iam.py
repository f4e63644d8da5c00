"""
IBM Cloud IAM token handling.

Cloudant instances protected by IAM expect a short‑lived bearer token that is
obtained by exchanging a long‑lived API key at the IAM token endpoint.  The
:class:`IAMTokenManager` performs that exchange, caches the token and
refreshes it once most of its lifetime has elapsed.  One manager is shared by
every concurrent flush, so access to the cache is serialised with a lock.
"""

import logging
import threading
import time
from typing import Optional

import requests

from cloudant_output_lib.constants import IAM_TOKEN_URL
from cloudant_output_lib.exceptions import AuthenticationError

IAM_GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"

# Fraction of the token lifetime after which a new token is requested
REFRESH_FRACTION = 0.8


class IAMTokenManager:
    """
    Exchange an API key for IAM access tokens and cache them.

    Parameters
    ----------
    api_key : str
        IBM Cloud API key.
    url : str
        IAM token endpoint, ``IAM_TOKEN_URL`` by default.
    timeout : int, default ``10``
        Timeout in seconds for the token request.
    logger : Optional[logging.Logger]
        Logger instance; if omitted, a module‑level logger is created.
    """

    def __init__(
        self,
        api_key: str,
        url: str = IAM_TOKEN_URL,
        timeout: int = 10,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.session = requests.Session()

        self._token: Optional[str] = None
        self._refresh_at = 0.0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        return self.get_token()

    def get_token(self) -> str:
        """
        Return a valid access token, requesting a new one when needed.

        Raises
        ------
        AuthenticationError
            If the IAM endpoint cannot be reached or refuses the API key.
        """
        with self._lock:
            if self._token is None or time.time() >= self._refresh_at:
                self._request_token()
            return self._token

    def _request_token(self) -> None:
        self.logger.debug("Requesting IAM access token from %s", self.url)
        try:
            resp = self.session.post(
                self.url,
                data={"grant_type": IAM_GRANT_TYPE, "apikey": self.api_key},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AuthenticationError(f"IAM token request failed: {exc}") from exc

        if resp.status_code != 200:
            raise AuthenticationError(
                f"IAM token request rejected: HTTP {resp.status_code}: {resp.text}"
            )
        try:
            body = resp.json()
            token = body["access_token"]
            expires_in = int(body.get("expires_in", 3600))
        except (ValueError, KeyError, TypeError) as exc:
            raise AuthenticationError(f"Invalid IAM token response: {exc}") from exc

        self._token = token
        self._refresh_at = time.time() + expires_in * REFRESH_FRACTION

    def close(self) -> None:
        self.session.close()
