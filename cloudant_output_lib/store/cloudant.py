"""
Cloudant implementation of :class:`StoreClientInterface`.

Documents are created with ``POST /{database}``; Cloudant answers
``201 Created`` (or ``202 Accepted``) with ``{"ok": true, "id": ..., "rev": ...}``.
When ``verify_writes`` is enabled every created document is read back with
``GET /{database}/{id}`` and logged, which is useful when checking what a
pipeline actually stored.
"""

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from cloudant_output_lib.constants import (
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    DEFAULT_URL_SCHEME,
)
from cloudant_output_lib.exceptions import StoreError
from cloudant_output_lib.store.store_interface import StoreClientInterface
from cloudant_output_lib.utils.http import HttpRequester
from cloudant_output_lib.utils.iam import IAMTokenManager


def with_default_scheme(endpoint: str) -> str:
    """Prefix ``endpoint`` with ``https://`` unless it already names a scheme."""
    endpoint = endpoint.strip()
    if "://" in endpoint:
        return endpoint
    return DEFAULT_URL_SCHEME + endpoint


class CloudantStoreClient(StoreClientInterface):
    """
    Document store client talking to IBM Cloudant over HTTP.

    Parameters
    ----------
    endpoint : str
        Cloudant service URL.  ``https://`` is assumed when no scheme is given.
    api_key : Optional[str]
        IBM Cloud API key.  When ``None`` requests are sent unauthenticated.
    timeout : int
        Per‑request timeout in seconds.
    retries : int
        Transport‑level retries for transient HTTP statuses.
    verify_writes : bool
        Read every created document back and log it.
    logger : Optional[logging.Logger]
        Logger instance; if omitted, a module‑level logger is created.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        verify_writes: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.endpoint = with_default_scheme(endpoint)
        self.verify_writes = verify_writes
        self.logger = logger or logging.getLogger(__name__)

        self.token_manager = None
        if api_key:
            self.token_manager = IAMTokenManager(
                api_key=api_key, timeout=timeout, logger=self.logger
            )

        self.http = HttpRequester(
            base_url=self.endpoint,
            token_provider=self.token_manager,
            timeout=timeout,
            retries=retries,
            logger=self.logger,
        )

    @staticmethod
    def _db_path(database: str, doc_id: Optional[str] = None) -> str:
        path = "/" + quote(database, safe="")
        if doc_id is not None:
            path += "/" + quote(doc_id, safe="")
        return path

    @staticmethod
    def _json_body(resp) -> Dict[str, Any]:
        try:
            return resp.json()
        except ValueError as exc:
            raise StoreError(f"Invalid response format: {exc}") from exc

    def create_document(self, database: str, document: Dict[str, Any]) -> str:
        resp = self.http.post(self._db_path(database), json=document)
        body = self._json_body(resp)
        if not isinstance(body, dict) or not body.get("ok"):
            raise StoreError(f"Document was not stored: {body}")

        doc_id = body.get("id", document.get("_id"))
        if self.verify_writes:
            stored = self.get_document(database, doc_id)
            self.logger.debug(
                "Stored document %s: %s", doc_id, json.dumps(stored, indent=2)
            )
        return doc_id

    def get_document(self, database: str, doc_id: str) -> Dict[str, Any]:
        resp = self.http.get(self._db_path(database, doc_id))
        return self._json_body(resp)

    def close(self) -> None:
        self.http.close()
        if self.token_manager is not None:
            self.token_manager.close()
