"""Optional ``erd.yaml`` settings that supply CLI defaults."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_NAME = "erd.yaml"


@dataclass
class Settings:
    output_format: str = "json"
    graph_format: str = "json"
    title: str = "Schema"
    schema: str = ""
    verbose: bool = False


def load_settings(path: Optional[str] = None) -> Settings:
    """Read settings from ``path``, or from ``./erd.yaml`` when it exists.

    An explicit path that does not exist raises ``FileNotFoundError``.
    """
    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            return Settings()

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ValueError("Config YAML must parse to an object/map at root.")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    return Settings(**data)
