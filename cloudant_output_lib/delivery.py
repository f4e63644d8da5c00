"""
Batch delivery of normalized records to a document store.

The engine walks a batch in order, gives every mapping record a fresh random
identity and submits it through a :class:`StoreClientInterface`.  Delivery is
fail‑fast and non‑transactional: the first store failure rejects the whole
batch, later records are never sent and documents stored before the failure
stay in the database.  Retrying a rejected batch is left to the host
pipeline.
"""

import enum
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional

from cloudant_output_lib.exceptions import StoreError
from cloudant_output_lib.identity import new_identity
from cloudant_output_lib.store.store_interface import StoreClientInterface

ID_FIELD = "_id"


class BatchResult(enum.Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def build_store_document(fields: Mapping, identity: str) -> Dict[str, Any]:
    """Copy ``fields`` into a new document keyed by ``identity``."""
    document = dict(fields)
    document[ID_FIELD] = identity
    return document


class BatchDeliveryEngine:
    """
    Deliver batches of normalized records to one database.

    Parameters
    ----------
    store : StoreClientInterface
        Client used to create documents.  It is only read, so one engine (or
        several engines sharing a client) may serve concurrent batches.
    database : str
        Target database name.
    logger : Optional[logging.Logger]
        Logger instance; if omitted, a module‑level logger is created.
    """

    def __init__(
        self,
        store: StoreClientInterface,
        database: str,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.store = store
        self.database = database
        self.logger = logger or logging.getLogger(__name__)

    def deliver(self, records: Iterable[Any]) -> BatchResult:
        """
        Submit ``records`` one by one and report a single batch outcome.

        Records that are not mappings are logged and skipped.  The first
        :class:`StoreError` stops the batch and yields ``REJECTED``.

        Returns
        -------
        BatchResult
            ``ACCEPTED`` when every mapping record was stored, otherwise
            ``REJECTED``.
        """
        sent = 0
        for position, record in enumerate(records):
            if not isinstance(record, Mapping):
                self.logger.warning(
                    "Skipping record %d: expected a mapping, got %s",
                    position,
                    type(record).__name__,
                )
                continue

            document = build_store_document(record, new_identity())
            try:
                self.store.create_document(self.database, document)
            except StoreError as exc:
                self.logger.error(
                    "Failed to send document %s to database %s: %s",
                    document[ID_FIELD],
                    self.database,
                    exc,
                )
                return BatchResult.REJECTED
            sent += 1

        self.logger.info(
            "Successfully sent all %d records to database %s.", sent, self.database
        )
        return BatchResult.ACCEPTED


def deliver(
    store: StoreClientInterface,
    database: str,
    records: Iterable[Any],
    logger: Optional[logging.Logger] = None,
) -> BatchResult:
    return BatchDeliveryEngine(store, database, logger=logger).deliver(records)
