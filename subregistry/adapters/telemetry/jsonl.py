"""JSON Lines Telemetry adapter.

Implements the Telemetry port by writing structured JSON objects (one per line) to disk.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

import orjson


class JsonlTelemetry:
    _REDACTION_TOKEN = "***REDACTED***"
    _DEFAULT_SECRET_KEYS = frozenset(
        {
            "api_key",
            "api_secret",
            "secret",
            "password",
            "token",
            "auth_token",
        }
    )

    def __init__(
        self,
        source: str,
        sink_path: Path,
        secret_keys: Iterable[str] = _DEFAULT_SECRET_KEYS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._source = str(source)
        self._sink_path = sink_path if isinstance(sink_path, Path) else Path(sink_path)
        # a bare string would be iterated char by char
        self._secret_keys = frozenset([secret_keys] if isinstance(secret_keys, str) else secret_keys)
        self._clock = clock

    @property
    def sink_path(self) -> Path:
        return self._sink_path

    def log(self, event: str, **fields: Any) -> None:
        sanitized_fields, redacted = self._sanitize_fields(fields)

        record: dict[str, Any] = {
            "event": event,
            "ts_utc": self._clock(),
            "source": self._source,
            **sanitized_fields,
        }
        if redacted:
            record["redacted_fields"] = sorted(redacted)

        self._write_record(record)

    def _sanitize_fields(self, fields: Mapping[str, Any]) -> tuple[dict[str, Any], set[str]]:
        sanitized: dict[str, Any] = {}
        redacted: set[str] = set()
        for key, value in fields.items():
            if key in self._secret_keys:
                sanitized[key] = self._REDACTION_TOKEN
                redacted.add(key)
            else:
                sanitized[key] = value

        return sanitized, redacted

    def _write_record(self, record: Mapping[str, Any]) -> None:
        line = orjson.dumps(
            record, default=str, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS,
        )
        with self._sink_path.open("ab") as handle:
            handle.write(line + b"\n")
