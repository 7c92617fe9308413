from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from imgtensor.errors import ConfigurationError


def load_config(path: str | Path) -> dict[str, Any]:
    """Load a config file into a Python dict.

    Supported formats:
    - JSON (.json) always
    - YAML (.yml/.yaml) only when PyYAML is installed
    """

    config_path = Path(path)
    suffix = str(config_path.suffix).lower()

    try:
        if suffix == ".json":
            with config_path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        elif suffix in (".yml", ".yaml"):
            try:
                import yaml  # type: ignore[import-not-found]
            except Exception as exc:  # noqa: BLE001 - dependency boundary
                raise ImportError(
                    "YAML config files require PyYAML.\n"
                    "Install it via:\n"
                    "  pip install 'PyYAML'"
                ) from exc

            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            raise ConfigurationError(
                f"Unsupported config extension: {suffix!r} for {str(config_path)!r}. "
                "Supported: .json, .yml, .yaml."
            )
    except OSError as exc:
        raise ConfigurationError(f"Unable to read config file {str(config_path)!r}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {str(config_path)!r}: {exc}") from exc

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config must be an object/dict at the top level, "
            f"got {type(data).__name__} from {str(config_path)!r}."
        )

    return dict(data)
