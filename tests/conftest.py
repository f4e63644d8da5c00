import logging
import threading

import pytest

from cloudant_output_lib.exceptions import StoreError
from cloudant_output_lib.store.store_interface import StoreClientInterface


class FakeStore(StoreClientInterface):
    """In-memory store; fails on the submissions listed in ``fail_on`` (1-based)."""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.submitted = []
        self.closed = False
        self._lock = threading.Lock()

    def create_document(self, database, document):
        with self._lock:
            self.submitted.append((database, document))
            position = len(self.submitted)
        if position in self.fail_on:
            raise StoreError("document rejected")
        return document["_id"]

    def get_document(self, database, doc_id):
        for db, doc in self.submitted:
            if db == database and doc["_id"] == doc_id:
                return doc
        raise StoreError(f"HTTP 404: {doc_id}")

    def close(self):
        self.closed = True

    @property
    def documents(self):
        return [doc for _, doc in self.submitted]


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def logger():
    return logging.getLogger("cloudant_output.tests")


@pytest.fixture
def make_store():
    return FakeStore
