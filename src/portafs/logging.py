# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Structured logging helpers for :mod:`portafs`.

Every record emitted through :class:`StructuredLogger` carries an ``event``
name and a ``context`` mapping. Filesystem operations pass filenames in the
context; they are rendered in their portable form so log output is identical
across platforms.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from collections.abc import Mapping, MutableMapping
from datetime import UTC, datetime
from typing import Any, cast, override

__all__ = [
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]

_LOG_LEVEL_ENV = "PORTAFS_LOG_LEVEL"
_LOG_FORMAT_ENV = "PORTAFS_LOG_FORMAT"


class StructuredLogger(logging.LoggerAdapter[logging.Logger]):
    """Logger adapter enforcing a minimal structured event schema."""

    def __init__(
        self,
        logger: logging.Logger,
        *,
        context: Mapping[str, object] | None = None,
    ) -> None:
        base_context = dict(context) if context is not None else {}
        super().__init__(logger, base_context)

    @override
    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        event = kwargs.pop("event", None)
        if not isinstance(event, str):
            raise TypeError("Structured logs require an 'event' field.")

        payload: dict[str, object] = dict(cast(Mapping[str, object], self.extra))
        inline_context = kwargs.pop("context", None)
        if inline_context is not None:
            if not isinstance(inline_context, Mapping):
                raise TypeError("context must be a mapping when provided.")
            payload.update(cast(Mapping[str, object], inline_context))

        extra = kwargs.get("extra") or {}
        payload.update(cast(Mapping[str, object], extra))
        kwargs["extra"] = {
            "event": event,
            "context": {key: _render(value) for key, value in payload.items()},
        }
        return msg, kwargs


def get_logger(
    name: str,
    *,
    context: Mapping[str, object] | None = None,
) -> StructuredLogger:
    """Return a :class:`StructuredLogger` scoped to ``name``."""

    return StructuredLogger(logging.getLogger(name), context=context)


def configure_logging(
    *,
    level: int | str | None = None,
    json_mode: bool | None = None,
    env: Mapping[str, str] | None = None,
    force: bool = False,
) -> None:
    """Configure the root logger for applications embedding :mod:`portafs`.

    ``level`` and ``json_mode`` fall back to the ``PORTAFS_LOG_LEVEL`` and
    ``PORTAFS_LOG_FORMAT`` environment variables (``json`` enables structured
    output, anything else keeps the text formatter). The library itself never
    calls this function.

    Existing root handlers are left untouched unless ``force=True``.
    """

    env = os.environ if env is None else env
    resolved_level = _coerce_level(level or env.get(_LOG_LEVEL_ENV))

    if json_mode is None:
        json_mode = env.get(_LOG_FORMAT_ENV, "text").lower() == "json"

    root_logger = logging.getLogger()
    if root_logger.handlers and not force:
        root_logger.setLevel(resolved_level)
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(event)s %(message)s %(context)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {"()": "portafs.logging._JsonFormatter"},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "json" if json_mode else "text",
                }
            },
            "root": {"handlers": ["stderr"], "level": resolved_level},
        }
    )


class _JsonFormatter(logging.Formatter):
    """Formatter that renders structured records as compact JSON."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event = getattr(record, "event", None)
        if event is not None:
            payload["event"] = event
        context = getattr(record, "context", None)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=repr, separators=(",", ":"))


def _render(value: object) -> object:
    """Render filenames and native byte paths as portable text."""

    to_string = getattr(value, "to_string", None)
    if isinstance(value, os.PathLike) and callable(to_string):
        return to_string()
    if isinstance(value, bytes):
        return os.fsdecode(value)
    return value


def _coerce_level(level: int | str | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelNamesMapping().get(level.upper())
    if resolved is None:
        raise TypeError(f"Unknown log level: {level!r}")
    return resolved
