from cloudant_output_lib.store.store_interface import StoreClientInterface
from cloudant_output_lib.store.cloudant import CloudantStoreClient

__all__ = ["StoreClientInterface", "CloudantStoreClient"]
