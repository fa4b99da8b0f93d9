"""The router as a separate OS process: ``python -m txn_pipeline run router ...``."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "txn_pipeline", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=60,
    )


def test_router_run_to_completion(tmp_path):
    feed = tmp_path / "transactions.jsonl"
    feed.write_text(
        json.dumps({"user": "bob", "amount": "1500.00", "transactionLocation": "LA"}) + "\n"
    )
    residences = tmp_path / "residences.json"
    residences.write_text(json.dumps({"bob": "NYC"}))

    result = _run(
        "run", "router", "--mq", "memory",
        "--transactions-file", str(feed), "--residences-file", str(residences),
    )
    assert result.returncode == 0, result.stderr
    assert "[User: bob, Amount: 1500.00, Loc: LA, Home: NYC] HIGH-VALUE, SUSPICIOUS" in result.stderr
    assert "Transaction feed exhausted" in result.stderr


def test_missing_required_arg_exits_1():
    result = _run("run", "router", "--mq", "memory")
    assert result.returncode == 1
    assert "Missing required argument: --transactions-file" in result.stderr


def test_unknown_module_exits_1():
    result = _run("run", "ledger")
    assert result.returncode == 1
    assert "module 'ledger' not found" in result.stderr
