import msgpack
import pytest

from cloudant_output_lib.store.cloudant import CloudantStoreClient
from cloudant_output_plugin.plugin import (
    CloudantOutputPlugin,
    FLB_ERROR,
    FLB_OK,
)

OPTIONS = {"Endpoint": "acct.cloudant.com", "Database": "logs"}


def _chunk(*records):
    return b"".join(
        msgpack.packb([1700000000, record], use_bin_type=True) for record in records
    )


@pytest.fixture
def plugin_with(logger):
    def _build(store):
        return CloudantOutputPlugin(
            logger=logger, store_factory=lambda config, api_key, log: store
        )

    return _build


def test_register_announces_name(plugin_with, fake_store):
    registration = plugin_with(fake_store).register()
    assert registration.name == "cloudant_output"
    assert "Cloudant" in registration.description


def test_init_builds_cloudant_client_by_default(logger):
    plugin = CloudantOutputPlugin(logger=logger)

    assert plugin.init(OPTIONS) == FLB_OK
    assert isinstance(plugin.context.store, CloudantStoreClient)
    assert plugin.context.store.endpoint == "https://acct.cloudant.com"
    assert plugin.exit() == FLB_OK


def test_init_with_env_credentials(monkeypatch, plugin_with, fake_store):
    monkeypatch.setenv("API_KEY", "secret")
    seen = {}

    def factory(config, api_key, log):
        seen["api_key"] = api_key
        return fake_store

    plugin = CloudantOutputPlugin(store_factory=factory)
    assert plugin.init({**OPTIONS, "Authentication_Mode": "ENV"}) == FLB_OK
    assert seen["api_key"] == "secret"


@pytest.mark.parametrize(
    "options",
    [
        {"Database": "logs"},
        {"Endpoint": "acct.cloudant.com"},
        {**OPTIONS, "Authentication_Mode": "BASIC"},
        {**OPTIONS, "Authentication_Mode": "IAMAPIKEY"},
        {**OPTIONS, "Authentication_Mode": "IAMAPIKEY", "CR_Token_Mount_Path": "/nope"},
    ],
)
def test_init_failures_report_error(plugin_with, fake_store, options):
    plugin = plugin_with(fake_store)
    assert plugin.init(options) == FLB_ERROR
    assert plugin.context is None


def test_env_mode_without_key_fails(monkeypatch, plugin_with, fake_store):
    monkeypatch.delenv("API_KEY", raising=False)
    plugin = plugin_with(fake_store)
    assert plugin.init({**OPTIONS, "Authentication_Mode": "ENV"}) == FLB_ERROR


def test_client_construction_failure_reports_error(logger):
    def factory(config, api_key, log):
        raise RuntimeError("boom")

    plugin = CloudantOutputPlugin(logger=logger, store_factory=factory)
    assert plugin.init(OPTIONS) == FLB_ERROR


def test_flush_before_init_is_error(plugin_with, fake_store):
    assert plugin_with(fake_store).flush(_chunk({"msg": "a"})) == FLB_ERROR
    assert fake_store.submitted == []


def test_flush_delivers_normalized_records(plugin_with, fake_store):
    plugin = plugin_with(fake_store)
    plugin.init(OPTIONS)

    status = plugin.flush(_chunk({"msg": b"a"}, {"msg": "b", "tags": [b"x"]}))

    assert status == FLB_OK
    docs = fake_store.documents
    assert [doc["msg"] for doc in docs] == ["a", "b"]
    assert docs[1]["tags"] == ["x"]
    assert all(db == "logs" for db, _ in fake_store.submitted)


def test_record_with_non_string_key_is_dropped(plugin_with, fake_store):
    plugin = plugin_with(fake_store)
    plugin.init(OPTIONS)

    status = plugin.flush(_chunk({"msg": "a"}, {1: "bad"}, {"msg": "c"}))

    assert status == FLB_OK
    assert [doc["msg"] for doc in fake_store.documents] == ["a", "c"]


def test_rejected_batch_reports_error_and_next_flush_proceeds(plugin_with, make_store):
    store = make_store(fail_on={2})
    plugin = plugin_with(store)
    plugin.init(OPTIONS)

    assert plugin.flush(_chunk({"msg": "a"}, {"msg": "b"})) == FLB_ERROR
    assert [doc["msg"] for doc in store.documents] == ["a", "b"]

    assert plugin.flush(_chunk({"msg": "c"})) == FLB_OK


def test_flush_records_skips_non_mappings(plugin_with, fake_store):
    plugin = plugin_with(fake_store)
    plugin.init(OPTIONS)

    assert plugin.flush_records([{"msg": "a"}, "text", {"msg": "b"}]) == FLB_OK
    assert [doc["msg"] for doc in fake_store.documents] == ["a", "b"]


def test_unexpected_delivery_error_is_reported(plugin_with, fake_store):
    def explode(database, document):
        raise TypeError("not serialisable")

    fake_store.create_document = explode
    plugin = plugin_with(fake_store)
    plugin.init(OPTIONS)

    assert plugin.flush_records([{"msg": "a"}]) == FLB_ERROR


def test_exit_closes_store(plugin_with, fake_store):
    plugin = plugin_with(fake_store)
    plugin.init(OPTIONS)

    assert plugin.exit() == FLB_OK
    assert fake_store.closed is True
    assert plugin.context is None


def _deep_entry(levels):
    # hand-built so the nesting is not limited by the packer
    nested = b"\x81\xa1k" * levels + msgpack.packb("leaf")
    return b"\x92" + msgpack.packb(1700000001) + nested


def test_deeply_nested_chunk_record_is_dropped(plugin_with, fake_store):
    plugin = plugin_with(fake_store)
    plugin.init(OPTIONS)

    data = _chunk({"msg": "a"}) + _deep_entry(600) + _chunk({"msg": "c"})

    assert plugin.flush(data) == FLB_OK
    assert [doc["msg"] for doc in fake_store.documents] == ["a", "c"]


def test_deeply_nested_record_is_dropped(plugin_with, fake_store):
    nested = "leaf"
    for _ in range(600):
        nested = {"k": nested}
    plugin = plugin_with(fake_store)
    plugin.init(OPTIONS)

    assert plugin.flush_records([{"msg": "a"}, nested]) == FLB_OK
    assert [doc["msg"] for doc in fake_store.documents] == ["a"]


def test_decoder_failure_reports_error(monkeypatch, plugin_with, fake_store):
    def explode(data, logger=None):
        raise msgpack.BufferFull()

    monkeypatch.setattr("cloudant_output_plugin.plugin.decode_records", explode)
    plugin = plugin_with(fake_store)
    plugin.init(OPTIONS)

    assert plugin.flush(_chunk({"msg": "a"})) == FLB_ERROR
    assert fake_store.submitted == []
