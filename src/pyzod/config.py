"""Process-wide configuration.

The configuration is read when issues are finalized and by the lazy
recursion guard; it is never written during a parse. Updates replace the
whole (frozen) object under a lock, so concurrent parses always observe a
consistent snapshot.

Config files hold only the data fields; error maps are code and must be
installed with ``configure(error_map=...)``:

    # pyzod.yaml
    locale: en
    report_input: false
    max_lazy_depth: 128
"""

from __future__ import annotations

import dataclasses
import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .issues import ErrorMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """Global defaults applied at finalization.

    Args:
        locale: Message catalog used when neither the issue, the schema nor
            the parse context supplies a message.
        error_map: Fallback error map consulted after the context error map.
        report_input: Whether finalized issues carry the offending input.
        max_lazy_depth: Nesting depth after which a lazy schema reports
            ``invalid_schema`` instead of recursing further.
    """

    locale: str = "en"
    error_map: ErrorMap | None = None
    report_input: bool = True
    max_lazy_depth: int = 64

    def __post_init__(self) -> None:
        if not isinstance(self.locale, str) or not self.locale:
            raise ValueError("locale must be a non-empty string")
        if self.error_map is not None and not callable(self.error_map):
            raise ValueError("error_map must be callable or None")
        if not isinstance(self.report_input, bool):
            raise ValueError("report_input must be a bool")
        if self.max_lazy_depth < 1:
            raise ValueError("max_lazy_depth must be >= 1")


_lock = threading.Lock()
_config = Config()


def get_config() -> Config:
    return _config


def configure(**changes: Any) -> Config:
    """Replace selected fields of the global configuration.

    Raises:
        ValueError: If a field name is unknown or a value is invalid.
    """
    global _config
    known = {f.name for f in dataclasses.fields(Config)}
    unknown = sorted(set(changes) - known)
    if unknown:
        raise ValueError(f"Unknown config field(s): {', '.join(unknown)}")
    with _lock:
        _config = dataclasses.replace(_config, **changes)
        current = _config
    logger.info("pyzod configuration updated: %s", ", ".join(sorted(changes)) or "(no changes)")
    return current


def reset_config() -> Config:
    global _config
    with _lock:
        _config = Config()
        current = _config
    logger.info("pyzod configuration reset to defaults")
    return current


# --- Serialization ---

def config_to_dict(config: Config) -> dict[str, Any]:
    """Serialize the data fields of a Config (the error map is omitted)."""
    d: dict[str, Any] = {"locale": config.locale}
    if not config.report_input:
        d["report_input"] = False
    if config.max_lazy_depth != Config.max_lazy_depth:
        d["max_lazy_depth"] = config.max_lazy_depth
    return d


def config_from_dict(d: dict[str, Any]) -> Config:
    """Build a Config from a plain dict, rejecting unknown keys."""
    if not isinstance(d, dict):
        raise ValueError(f"config must be a dict, got {type(d).__name__}")
    allowed = {"locale", "report_input", "max_lazy_depth"}
    unknown = sorted(set(d) - allowed)
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")
    return Config(**d)


def config_from_json(source: str | Path) -> Config:
    """Load a Config from a JSON string or a ``.json`` file."""
    path = Path(source)
    if path.suffix == ".json":
        text = path.read_text(encoding="utf-8")
    else:
        text = str(source)
    d = json.loads(text)
    if not isinstance(d, dict):
        raise ValueError(f"JSON must deserialize to a dict, got {type(d).__name__}")
    return config_from_dict(d)


def config_from_yaml(source: str | Path) -> Config:
    """Load a Config from a YAML string or a ``.yaml``/``.yml`` file."""
    try:
        import yaml
    except ImportError:
        raise ImportError("PyYAML is required for YAML configuration: pip install pyyaml")

    path = Path(source)
    if path.suffix in (".yaml", ".yml"):
        text = path.read_text(encoding="utf-8")
    else:
        text = str(source)
    d = yaml.safe_load(text)
    if d is None:
        d = {}
    if not isinstance(d, dict):
        raise ValueError(f"YAML must deserialize to a dict, got {type(d).__name__}")
    return config_from_dict(d)


def load_config(path: str | Path) -> Config:
    """Load a config file, choosing the format from its suffix, and install it."""
    path = Path(path)
    if path.suffix in (".yaml", ".yml"):
        loaded = config_from_yaml(path)
    elif path.suffix == ".json":
        loaded = config_from_json(path)
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix or '(none)'}")
    return configure(
        locale=loaded.locale,
        report_input=loaded.report_input,
        max_lazy_depth=loaded.max_lazy_depth,
    )
