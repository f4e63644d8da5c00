"""
Abstract definition for document‑store back‑ends.

Any concrete implementation must inherit from :class:`StoreClientInterface`
and provide :meth:`create_document`, which persists one document in a named
database.  The delivery engine depends only on this contract, so the
Cloudant client can be swapped for another store (or a fake in tests)
without touching the batch logic.
"""

import abc
from typing import Any, Dict


class StoreClientInterface(abc.ABC):
    """
    Base class for document‑store clients.

    Implementations must be safe to share between concurrent callers once
    constructed.  Any failure to persist a document is reported by raising
    :class:`~cloudant_output_lib.exceptions.StoreError` (or a subclass).
    """

    @abc.abstractmethod
    def create_document(self, database: str, document: Dict[str, Any]) -> str:
        """
        Persist a single document.

        Parameters
        ----------
        database : str
            Name of the target database (collection).
        document : Dict[str, Any]
            JSON‑serialisable document, including its ``_id`` field.

        Returns
        -------
        str
            Identifier under which the store saved the document.

        Raises
        ------
        StoreError
            If the store rejects the document or cannot be reached.
        """
        raise NotImplementedError

    def get_document(self, database: str, doc_id: str) -> Dict[str, Any]:
        """
        Fetch a stored document by its identifier.

        Back‑ends that cannot read documents back keep this default, which
        raises ``NotImplementedError``.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the client."""
        pass
