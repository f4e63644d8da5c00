"""
Host pipeline lifecycle for the Cloudant output plugin.

The host drives the plugin through four calls:

1. :meth:`CloudantOutputPlugin.register` – announce name and description,
2. :meth:`CloudantOutputPlugin.init` – validate options, resolve the API key
   and build the Cloudant client,
3. :meth:`CloudantOutputPlugin.flush` – decode, normalize and deliver one
   chunk of records (may be called concurrently),
4. :meth:`CloudantOutputPlugin.exit` – release resources.

Every call answers with one of the host status codes below and never lets
an exception escape.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from cloudant_output_lib.constants import LOG_LEVEL, PLUGIN_NAME, PLUGIN_DESCRIPTION
from cloudant_output_lib.credentials import resolve_api_key
from cloudant_output_lib.data_models.config import PluginConfig, load_config
from cloudant_output_lib.decoder import decode_records
from cloudant_output_lib.delivery import BatchDeliveryEngine, BatchResult
from cloudant_output_lib.exceptions import CloudantOutputError, NormalizationError
from cloudant_output_lib.normalizer import normalize
from cloudant_output_lib.store import CloudantStoreClient, StoreClientInterface
from cloudant_output_lib.utils.logger import prepare_logger

FLB_ERROR = -1
FLB_OK = 1


@dataclass(frozen=True)
class PluginRegistration:
    name: str
    description: str


@dataclass(frozen=True)
class PluginContext:
    """Everything a flush needs, built once by ``init`` and never mutated."""

    config: PluginConfig
    store: StoreClientInterface
    engine: BatchDeliveryEngine


class CloudantOutputPlugin:
    """
    Output plugin writing pipeline records to IBM Cloudant.

    Parameters
    ----------
    logger : Optional[logging.Logger]
        Logger instance; by default a ``cloudant_output`` logger prepared with
        the level from ``CLOUDANT_OUTPUT_LOG_LEVEL``.
    store_factory : callable, optional
        Builds the store client from ``(config, api_key, logger)``.  Defaults
        to :class:`CloudantStoreClient`; tests pass a fake here.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, store_factory=None):
        self.logger = logger or prepare_logger(PLUGIN_NAME, LOG_LEVEL)
        self.store_factory = store_factory or self._cloudant_store
        self.context: Optional[PluginContext] = None

    @staticmethod
    def _cloudant_store(
        config: PluginConfig, api_key: Optional[str], logger: logging.Logger
    ) -> StoreClientInterface:
        return CloudantStoreClient(
            endpoint=config.endpoint,
            api_key=api_key,
            timeout=config.timeout,
            retries=config.retries,
            verify_writes=config.verify_writes,
            logger=logger,
        )

    def register(self) -> PluginRegistration:
        self.logger.debug("In register")
        return PluginRegistration(name=PLUGIN_NAME, description=PLUGIN_DESCRIPTION)

    def init(self, options: Mapping[str, str]) -> int:
        self.logger.debug("In init")
        try:
            config = load_config(options)
            api_key = resolve_api_key(config, logger=self.logger)
            store = self.store_factory(config, api_key, self.logger)
        except CloudantOutputError as exc:
            self.logger.error("Initialization failed: %s", exc)
            return FLB_ERROR
        except Exception as exc:
            self.logger.error("Failed to initialize Cloudant service: %s", exc)
            return FLB_ERROR

        self.context = PluginContext(
            config=config,
            store=store,
            engine=BatchDeliveryEngine(store, config.database, logger=self.logger),
        )
        self.logger.info(
            "Output plugin initialized with endpoint %s, database %s",
            config.endpoint,
            config.database,
        )
        return FLB_OK

    def normalize_records(self, records: Iterable[Any]) -> List[Any]:
        """Normalize ``records``, dropping the ones that cannot be converted."""
        normalized = []
        for position, record in enumerate(records):
            try:
                normalized.append(normalize(record))
            except NormalizationError as exc:
                self.logger.warning("Failed to convert record %d: %s", position, exc)
        return normalized

    def flush(self, data: bytes, tag: str = "") -> int:
        try:
            records = decode_records(data, logger=self.logger)
        except Exception:
            self.logger.exception("Failed to decode chunk (tag=%s)", tag)
            return FLB_ERROR
        return self.flush_records(records, tag=tag)

    def flush_records(self, records: Iterable[Any], tag: str = "") -> int:
        context = self.context
        if context is None:
            self.logger.error("Flush called before a successful init")
            return FLB_ERROR

        batch = self.normalize_records(records)
        self.logger.debug("Flushing %d records (tag=%s)", len(batch), tag)
        try:
            result = context.engine.deliver(batch)
        except Exception:
            self.logger.exception("Unexpected error while delivering batch")
            return FLB_ERROR
        return FLB_OK if result is BatchResult.ACCEPTED else FLB_ERROR

    def exit(self) -> int:
        self.logger.debug("In exit")
        context, self.context = self.context, None
        if context is not None:
            context.store.close()
        self.logger.info("Plugin exiting")
        return FLB_OK
