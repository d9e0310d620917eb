from __future__ import annotations

from pathlib import Path

import pytest
import redis

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

VALKEY_ENV_VARS = (
    "VCAP_SERVICES",
    "VALKEY_HOST",
    "VALKEY_PORT",
    "VALKEY_USERNAME",
    "VALKEY_PASSWORD",
    "PORT",
    "APP_DIR",
)


def _undecodable() -> UnicodeDecodeError:
    # What decode_responses=True raises for a non-UTF-8 reply.
    return UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


class FakeStore:
    """In-memory stand-in for a connected store client."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})
        self.fail_keys = False
        self.fail_set = False
        self.fail_get: set[str] = set()
        self.binary_values: set[str] = set()
        self.binary_keys = False
        self.closed = False

    def ping(self) -> bool:
        return True

    def keys(self, pattern: str = "*") -> list[str]:
        if self.fail_keys:
            raise redis.ConnectionError("connection reset")
        if self.binary_keys:
            raise _undecodable()
        assert pattern == "*"
        return list(self.data)

    def get(self, key: str) -> str | None:
        if key in self.fail_get:
            raise redis.ResponseError(
                "WRONGTYPE Operation against a key holding the wrong kind of value"
            )
        if key in self.binary_values:
            raise _undecodable()
        return self.data.get(key)

    def set(self, key: str, value: str) -> bool:
        if self.fail_set:
            raise redis.ResponseError("READONLY You can't write against a read only replica.")
        self.data[key] = value
        return True

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in VALKEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def ca_pem() -> str:
    return (FIXTURES_DIR / "ca.pem").read_text(encoding="utf-8")
