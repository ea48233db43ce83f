"""
Money Kernel Configuration (``money_kernel.config``).

Responsibility
--------------
Defines the process-wide settings of the money kernel and loads them from
the bundled ``data/settings.yaml`` (or an explicit YAML file) into a frozen,
validated ``MoneyKernelConfig``.

Architecture position
---------------------
**Infrastructure leaf** -- imported by the decimal backend, the currency
model and the metadata registry. It depends only on PyYAML and the logging
module, never on domain code, so locale tags and backend names are
validated here as plain strings.

Invariants enforced
-------------------
* ``decimal_backend`` is one of ``VALID_DECIMAL_BACKENDS``.
* ``default_locale`` is one of ``VALID_LOCALE_TAGS``.
* The config object is immutable once built; changing settings means
  building a new one (``load_config``) or clearing the cache
  (``reset_config``).
* No environment variables are consulted.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or invalid values  -> ``ValueError``.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Self

import yaml

from money_kernel.logging_config import get_logger

logger = get_logger("config")

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_SETTINGS_FILE = DATA_DIR / "settings.yaml"

VALID_DECIMAL_BACKENDS = {"fixed", "arbitrary"}
VALID_LOCALE_TAGS = {"en-US", "en-IN", "en-EU", "en-BY"}


@dataclass(frozen=True, slots=True)
class MoneyKernelConfig:
    """
    Settings for the money kernel.

    Field defaults match the bundled settings file:

        config = MoneyKernelConfig(decimal_backend="arbitrary")
    """

    # Decimal backend: "fixed" (28 digits) or "arbitrary"
    decimal_backend: str = "fixed"

    # Locale used when a currency has no metadata locale
    default_locale: str = "en-US"

    # Grouping validation mode for Money.from_default_locale_str
    strict_locale_parsing: bool = True

    # Built-in currency metadata, relative paths resolve against data/
    builtin_metadata_file: str = "currency_metadata.yaml"

    def __post_init__(self) -> None:
        if self.decimal_backend not in VALID_DECIMAL_BACKENDS:
            raise ValueError(
                f"decimal_backend must be one of {sorted(VALID_DECIMAL_BACKENDS)}, "
                f"got {self.decimal_backend!r}"
            )
        if self.default_locale not in VALID_LOCALE_TAGS:
            raise ValueError(
                f"default_locale must be one of {sorted(VALID_LOCALE_TAGS)}, "
                f"got {self.default_locale!r}"
            )
        if not isinstance(self.strict_locale_parsing, bool):
            raise ValueError("strict_locale_parsing must be a boolean")
        if not self.builtin_metadata_file:
            raise ValueError("builtin_metadata_file cannot be empty")

    @property
    def builtin_metadata_path(self) -> Path:
        """Absolute path of the built-in metadata YAML file."""
        path = Path(self.builtin_metadata_file)
        if path.is_absolute():
            return path
        return DATA_DIR / path

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from a dictionary (e.g., loaded from YAML)."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(
                f"Unknown money_kernel settings: {sorted(unknown)}. "
                f"Valid settings are: {sorted(known)}"
            )
        return cls(**data)


def load_config(path: Path | str | None = None) -> MoneyKernelConfig:
    """
    Load settings from YAML.

    Preconditions:
        - ``path`` is None (bundled defaults) or names a readable YAML file
          whose top-level mapping holds a ``money_kernel`` section.
    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if a setting is unknown or invalid.
    """
    settings_path = Path(path) if path is not None else DEFAULT_SETTINGS_FILE
    with open(settings_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    section = raw.get("money_kernel", {}) or {}
    if not isinstance(section, dict):
        raise ValueError(
            f"'money_kernel' section in {settings_path} must be a mapping"
        )

    config = MoneyKernelConfig.from_dict(section)
    logger.info(
        "money_kernel_config_loaded",
        extra={
            "path": str(settings_path),
            "decimal_backend": config.decimal_backend,
            "default_locale": config.default_locale,
            "strict_locale_parsing": config.strict_locale_parsing,
        },
    )
    return config


_active_config: MoneyKernelConfig | None = None
_config_lock = threading.Lock()


def get_config() -> MoneyKernelConfig:
    """Return the process-wide config, loading the bundled defaults once."""
    global _active_config
    with _config_lock:
        if _active_config is None:
            _active_config = load_config()
        return _active_config


def set_config(config: MoneyKernelConfig) -> None:
    """Install an explicit config object as the process-wide config."""
    global _active_config
    with _config_lock:
        _active_config = config


def reset_config() -> None:
    """Clear the cached config. FOR TESTING ONLY."""
    global _active_config
    with _config_lock:
        _active_config = None
