"""Structured logging for the line editor on telelog.

A read in progress owns the terminal, so nothing is written to the console
unless ``LINE_EDITOR_LOG_CONSOLE`` is set. ``LINE_EDITOR_LOG_PRESET`` picks
one of :data:`PRESETS` instead of the individual ``LINE_EDITOR_LOG_*`` keys.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "LINE_EDITOR_"
DEFAULT_LOGGER_NAME = "line_editor"

PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {"level": "DEBUG", "console": True},
    "production": {
        "level": "WARNING",
        "file": "line_editor.log",
        "buffered": True,
    },
    "performance": {
        "level": "DEBUG",
        "file": "line_editor-performance.log",
        "buffered": True,
        "json": True,
        "profiling": True,
    },
}

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in {"1", "true", "yes", "on"}


def _settings_from_env() -> Dict[str, Any]:
    return {
        "level": (_env("LOG_LEVEL") or "WARNING").upper(),
        "console": _env_flag("LOG_CONSOLE"),
        "json": _env_flag("LOG_JSON"),
        "file": _env("LOG_FILE") or "",
        "buffered": _env_flag("LOG_BUFFERED"),
        "buffer_size": int(_env("LOG_BUFFER_SIZE") or "2048"),
        "profiling": _env_flag("PROFILE"),
    }


def build_config(preset: Optional[str] = None) -> Any:
    """Translate a preset (or the environment) into a ``telelog.Config``."""

    if preset:
        try:
            settings = dict(PRESETS[preset.lower()])
        except KeyError as exc:
            raise ValueError(
                f"Unknown log preset '{preset}'; expected one of {sorted(PRESETS)}"
            ) from exc
        settings["file"] = _env("LOG_FILE") or settings.get("file", "")
    else:
        settings = _settings_from_env()

    config = tl.Config()
    config.with_min_level(settings["level"])
    config.with_console_output(settings.get("console", False))
    if settings.get("console"):
        config.with_colored_output(not _env_flag("NO_COLOR"))
    config.with_json_format(settings.get("json", False))
    if settings.get("file"):
        config.with_file_output(settings["file"])
    if settings.get("buffered"):
        config.with_buffering(True)
        config.with_buffer_size(settings.get("buffer_size", 2048))
    config.with_profiling(settings.get("profiling", False))
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active configuration and drop cached loggers.

    Without arguments the preset named by ``LINE_EDITOR_LOG_PRESET`` is used,
    falling back to the individual environment keys.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    _ACTIVE_CONFIG = config if config is not None else build_config(
        preset or _env("LOG_PRESET")
    )
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached ``telelog.Logger`` for ``name``."""

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        if _ACTIVE_CONFIG is None:
            configure()
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ACTIVE_CONFIG
        )
    return _LOGGER_CACHE[logger_name]


def _text(value: Any) -> str:
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _emit(log: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    """Log ``payload`` as key/value pairs when the level supports it."""

    name = level.lower()
    structured = getattr(log, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(key), _text(value)) for key, value in payload.items()])
        return
    plain = getattr(log, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit an ``event::<name>`` line carrying ``data``."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Collects metadata reported when the span closes."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def payload(self, **extra: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"span": self.name}
        if self.component:
            payload["component"] = self.component
        payload.update(self.metadata)
        payload.update(extra)
        return payload


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block; report ``span::done`` or ``span::fail`` on exit.

    ``metadata`` is also attached to the logger context while the block
    runs, and ``component`` is tracked through telelog.
    """

    log = get_logger(logger_name)
    handle = SpanHandle(
        logger=log,
        name=name,
        component=component,
        metadata={key: _text(value) for key, value in (metadata or {}).items()},
    )

    with ExitStack() as stack:
        for key, value in list(handle.metadata.items()):
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))

        try:
            yield handle
        except Exception as exc:
            _emit(log, "error", "span::fail", handle.payload(reason=str(exc)))
            raise
        _emit(log, "debug", "span::done", handle.payload())


__all__ = [
    "PRESETS",
    "SpanHandle",
    "build_config",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
