from __future__ import annotations

import logging
from dataclasses import dataclass

import redis

from valkey_demo.errors import StoreOperationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyValueRecord:
    key: str
    value: str


def list_key_values(client: redis.Redis) -> list[KeyValueRecord]:
    """Collect every key and its string value.

    Keys whose value cannot be fetched are logged and left out; partial results
    are acceptable.
    """

    logger.info("Collecting keys")
    try:
        keys = client.keys("*")
    except (redis.RedisError, UnicodeDecodeError) as exc:
        raise StoreOperationError(f"Failed to fetch keys: {exc}") from exc

    records: list[KeyValueRecord] = []
    for key in sorted(keys):
        try:
            value = client.get(key)
        except (redis.RedisError, UnicodeDecodeError) as exc:
            # Values are decoded as UTF-8; binary values cannot be rendered.
            logger.warning("Failed to fetch value for key %s: %s", key, exc)
            continue
        if value is None:
            # Expired or deleted between KEYS and GET.
            logger.warning("Failed to fetch value for key %s: key vanished", key)
            continue
        records.append(KeyValueRecord(key=key, value=value))

    return records


def set_key_value(client: redis.Redis, key: str, value: str) -> None:
    try:
        client.set(key, value)
    except redis.RedisError as exc:
        raise StoreOperationError(f"Failed to set key {key}: {exc}") from exc
