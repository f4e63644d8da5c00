import uuid

import pytest

from cloudant_output_lib.delivery import BatchDeliveryEngine, BatchResult, deliver


def test_all_success_batch_is_accepted(fake_store):
    records = [{"msg": "a"}, {"msg": "b"}]

    result = deliver(fake_store, "logs", records)

    assert result is BatchResult.ACCEPTED
    assert [db for db, _ in fake_store.submitted] == ["logs", "logs"]
    docs = fake_store.documents
    assert [doc["msg"] for doc in docs] == ["a", "b"]
    assert docs[0]["_id"] != docs[1]["_id"]
    for doc in docs:
        assert uuid.UUID(doc["_id"]).version == 4
        assert set(doc) == {"_id", "msg"}


def test_second_document_rejected_stops_batch(make_store):
    store = make_store(fail_on={2})

    result = deliver(store, "logs", [{"msg": "a"}, {"msg": "b"}])

    assert result is BatchResult.REJECTED
    assert [doc["msg"] for doc in store.documents] == ["a", "b"]


@pytest.mark.parametrize("failing", [1, 3, 5])
def test_fail_fast_submits_exactly_up_to_failure(make_store, failing):
    store = make_store(fail_on={failing})
    records = [{"n": n} for n in range(1, 6)]

    result = deliver(store, "logs", records)

    assert result is BatchResult.REJECTED
    assert [doc["n"] for doc in store.documents] == list(range(1, failing + 1))


def test_non_mapping_record_is_skipped(fake_store):
    records = [{"msg": "a"}, "not a mapping", ["nor", "this"], {"msg": "b"}]

    result = deliver(fake_store, "logs", records)

    assert result is BatchResult.ACCEPTED
    assert [doc["msg"] for doc in fake_store.documents] == ["a", "b"]


def test_empty_batch_is_accepted(fake_store):
    assert deliver(fake_store, "logs", []) is BatchResult.ACCEPTED
    assert fake_store.submitted == []


def test_generated_identity_overrides_record_id(fake_store):
    deliver(fake_store, "logs", [{"_id": "mine", "msg": "a"}])

    doc = fake_store.documents[0]
    assert doc["_id"] != "mine"
    assert doc["msg"] == "a"


def test_record_is_not_mutated(fake_store):
    record = {"msg": "a"}
    deliver(fake_store, "logs", [record])
    assert record == {"msg": "a"}


def test_engine_is_reusable_across_batches(make_store, logger):
    store = make_store(fail_on={1})
    engine = BatchDeliveryEngine(store, "logs", logger=logger)

    assert engine.deliver([{"msg": "a"}]) is BatchResult.REJECTED
    assert engine.deliver([{"msg": "b"}]) is BatchResult.ACCEPTED
    assert len(store.documents) == 2
