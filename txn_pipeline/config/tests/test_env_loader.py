from pathlib import Path

import pytest

from txn_pipeline.config.env_loader import load_env_file, parse_env_lines


def _write(tmp_path: Path, name: str, text: str) -> None:
    env_dir = tmp_path / ".env"
    env_dir.mkdir(exist_ok=True)
    (env_dir / f"{name}.env").write_text(text)


def test_load_valid_env_file(tmp_path: Path):
    _write(tmp_path, "local", "MQ_KAFKA_BOOTSTRAP_SERVERS=localhost:9092\nMQ_KAFKA_CLIENT_ID=router\n")
    assert load_env_file("local", project_root=tmp_path) == {
        "MQ_KAFKA_BOOTSTRAP_SERVERS": "localhost:9092",
        "MQ_KAFKA_CLIENT_ID": "router",
    }


def test_load_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError, match="staging.env"):
        load_env_file("staging", project_root=tmp_path)


def test_comments_blank_lines_and_export_prefix():
    lines = ["# broker", "", "export LOG_IMPL=memory", "  # another", "no equals sign"]
    assert parse_env_lines(lines) == {"LOG_IMPL": "memory"}


def test_quoted_values():
    assert parse_env_lines(["SINGLE='hello'", 'DOUBLE="world"']) == {
        "SINGLE": "hello",
        "DOUBLE": "world",
    }


def test_value_with_equals_sign():
    assert parse_env_lines(["URL=kafka://host:9092?opt=1"]) == {"URL": "kafka://host:9092?opt=1"}
