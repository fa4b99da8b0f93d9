import pytest

from txn_pipeline.services.secrets.env_secrets import EnvSecrets


def test_override_wins_over_environment(monkeypatch):
    monkeypatch.setenv("MQ_KAFKA_CLIENT_ID", "from-env")
    secrets = EnvSecrets(overrides={"MQ_KAFKA_CLIENT_ID": "from-override"})
    assert secrets.get("MQ_KAFKA_CLIENT_ID") == "from-override"


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("MQ_KAFKA_BOOTSTRAP_SERVERS", "broker:29092")
    assert EnvSecrets().get("MQ_KAFKA_BOOTSTRAP_SERVERS") == "broker:29092"


def test_get_returns_none_for_missing():
    assert EnvSecrets(overrides={}).get("TXN_NONEXISTENT_KEY_12345") is None


def test_get_or_default():
    secrets = EnvSecrets(overrides={"PRESENT": "yes"})
    assert secrets.get_or_default("PRESENT", "no") == "yes"
    assert secrets.get_or_default("TXN_NONEXISTENT_KEY_12345", "no") == "no"


def test_get_int():
    secrets = EnvSecrets(overrides={"METRICS_PROMETHEUS_PORT": "9100", "BLANK": "  "})
    assert secrets.get_int("METRICS_PROMETHEUS_PORT", 9091) == 9100
    assert secrets.get_int("BLANK", 9091) == 9091
    with pytest.raises(ValueError, match="not a valid int"):
        EnvSecrets(overrides={"P": "x"}).get_int("P", 0)


def test_get_float_parses_and_defaults():
    secrets = EnvSecrets(overrides={"MQ_KAFKA_PUBLISH_TIMEOUT": "2.5", "EMPTY": ""})
    assert secrets.get_float("MQ_KAFKA_PUBLISH_TIMEOUT", 10.0) == 2.5
    assert secrets.get_float("EMPTY", 10.0) == 10.0
    assert secrets.get_float("TXN_NONEXISTENT_KEY_12345", 10.0) == 10.0


def test_get_float_rejects_garbage():
    secrets = EnvSecrets(overrides={"MQ_KAFKA_PUBLISH_TIMEOUT": "soon"})
    with pytest.raises(ValueError, match="MQ_KAFKA_PUBLISH_TIMEOUT"):
        secrets.get_float("MQ_KAFKA_PUBLISH_TIMEOUT", 10.0)
