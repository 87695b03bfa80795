from __future__ import annotations

import json
import os
import tempfile
from typing import Any, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from balikbot.domain import NotFoundError, StorageError


class KeyValueStore(Protocol):
    def get(self, key: str) -> str:
        """Return the value for ``key``; raise NotFoundError if there is none."""
        ...

    def put(self, key: str, value: str) -> None:
        ...


class DynamoDBStore:
    """Records of shape ``{"type": <key>, "date": <value>}`` in one table.

    ``type`` is the hash key, so a put overwrites the previous record.
    """

    def __init__(self, *, table_name: str, client: Any) -> None:
        self.table_name = table_name
        self._client = client

    def get(self, key: str) -> str:
        try:
            result = self._client.query(
                TableName=self.table_name,
                ExpressionAttributeNames={"#date": "date", "#type": "type"},
                ExpressionAttributeValues={":type": {"S": key}},
                KeyConditionExpression="#type = :type",
                ProjectionExpression="#date",
                ScanIndexForward=False,
                Limit=1,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to read {key!r} from {self.table_name}: {e}") from e

        items = result.get("Items", [])
        if not items:
            raise NotFoundError(f"No {key!r} record in {self.table_name}")

        try:
            return items[0]["date"]["S"]
        except KeyError as e:
            raise StorageError(f"Malformed {key!r} record in {self.table_name}: {items[0]!r}") from e

    def put(self, key: str, value: str) -> None:
        try:
            self._client.put_item(
                TableName=self.table_name,
                Item={"type": {"S": key}, "date": {"S": value}},
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to write {key!r} to {self.table_name}: {e}") from e


class FileStore:
    """JSON object on local disk, for running outside AWS."""

    def __init__(self, path: str) -> None:
        self.path = path

    def _load(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read state file {self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise StorageError(f"State file {self.path} does not hold a JSON object")
        return {str(k): str(v) for k, v in raw.items()}

    def get(self, key: str) -> str:
        data = self._load()
        if key not in data:
            raise NotFoundError(f"No {key!r} record in {self.path}")
        return data[key]

    def put(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value

        folder = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(folder, exist_ok=True)

            # Atomic write
            with tempfile.NamedTemporaryFile("w", delete=False, encoding="utf-8", dir=folder, suffix=".tmp") as tf:
                json.dump(data, tf, ensure_ascii=False, indent=2)
                tmp_name = tf.name

            os.replace(tmp_name, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write state file {self.path}: {e}") from e
