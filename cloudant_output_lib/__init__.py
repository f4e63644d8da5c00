from cloudant_output_lib.delivery import BatchResult, BatchDeliveryEngine, deliver
from cloudant_output_lib.identity import new_identity
from cloudant_output_lib.normalizer import normalize
from cloudant_output_lib.store import StoreClientInterface, CloudantStoreClient
from cloudant_output_lib.exceptions import (
    CloudantOutputError,
    ConfigError,
    CredentialError,
    NormalizationError,
    NonStringKeyError,
    StoreError,
)

__all__ = [
    "BatchResult",
    "BatchDeliveryEngine",
    "deliver",
    "new_identity",
    "normalize",
    "StoreClientInterface",
    "CloudantStoreClient",
    "CloudantOutputError",
    "ConfigError",
    "CredentialError",
    "NormalizationError",
    "NonStringKeyError",
    "StoreError",
]
