import json

from subregistry.adapters.telemetry.jsonl import JsonlTelemetry
from subregistry.config.configs import FailurePolicy, RegistryConfig
from subregistry.core.registry import SubscriptionRegistry


def _read_records(path):
    content = path.read_text(encoding="utf-8").strip()
    assert content, "expected telemetry sink to contain at least one record"
    return [json.loads(line) for line in content.splitlines()]


def test_jsonl_telemetry_writes_one_record_per_line(tmp_path):
    sink = tmp_path / "events.log.jsonl"
    telemetry = JsonlTelemetry(source="unit", sink_path=sink, clock=lambda: 1700000000.0)

    telemetry.log("first", count=1)
    telemetry.log("second", count=2)

    records = _read_records(sink)
    assert [r["event"] for r in records] == ["first", "second"]
    assert records[0]["source"] == "unit"
    assert records[0]["ts_utc"] == 1700000000.0
    assert records[1]["count"] == 2


def test_jsonl_telemetry_redacts_secret_keys(tmp_path):
    sink = tmp_path / "events.log.jsonl"
    telemetry = JsonlTelemetry(source="unit", sink_path=str(sink), secret_keys="api_key")

    telemetry.log("config_resolved", api_key="super-secret", keys_total=3)

    (record,) = _read_records(sink)
    assert record["api_key"] == "***REDACTED***"
    assert record["keys_total"] == 3
    assert record["redacted_fields"] == ["api_key"]


def test_jsonl_telemetry_stringifies_unknown_values(tmp_path):
    sink = tmp_path / "events.log.jsonl"
    telemetry = JsonlTelemetry(source="unit", sink_path=sink)

    telemetry.log("odd", value=object)

    (record,) = _read_records(sink)
    assert record["value"] == str(object)


def test_registry_emits_lifecycle_events(tmp_path):
    sink = tmp_path / "registry.jsonl"
    telemetry = JsonlTelemetry(source="unit", sink_path=sink)
    registry = SubscriptionRegistry(
        RegistryConfig(name="prices", failure_policy=FailurePolicy.COLLECT), telemetry=telemetry
    )

    class Broken:
        def receive(self, event):
            raise RuntimeError("nope")

    seen = []
    sub_id = registry.register_callback(seen.append)
    registry.register(Broken())
    registry.notify_all({"price": 1})
    registry.remove_id(sub_id)
    registry.clear()

    records = _read_records(sink)
    assert [r["event"] for r in records] == [
        "REGISTRY_SUBSCRIBER_ATTACHED",
        "REGISTRY_SUBSCRIBER_ATTACHED",
        "REGISTRY_SUBSCRIBER_FAILED",
        "REGISTRY_NOTIFY",
        "REGISTRY_SUBSCRIBER_DETACHED",
        "REGISTRY_CLEARED",
    ]
    assert all(r["registry"] == "prices" for r in records)
    notify = records[3]
    assert notify["event_type"] == "dict"
    assert notify["delivered"] == 1
    assert notify["failed"] == 1
    assert records[4]["reason"] == "remove_id"
    assert records[5]["removed"] == 1


def test_failing_telemetry_does_not_break_registry(caplog):
    class BrokenTelemetry:
        def log(self, event, **fields):
            raise OSError("disk full")

    registry = SubscriptionRegistry(telemetry=BrokenTelemetry())
    seen = []
    registry.register_callback(seen.append)
    registry.notify_all("e")

    assert seen == ["e"]
    assert "Telemetry failed on REGISTRY_NOTIFY" in caplog.text


def test_jsonl_telemetry_accepts_non_string_keys(tmp_path):
    sink = tmp_path / "events.log.jsonl"
    telemetry = JsonlTelemetry(source="unit", sink_path=sink)

    telemetry.log("evt", counts={1: "a", 2: "b"})

    (record,) = _read_records(sink)
    assert record["counts"] == {"1": "a", "2": "b"}
