from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path


CONFIG_FILENAME = ".pathsel.json"
DEFAULT_EXCLUDES_ENV = "PATHSEL_DEFAULT_EXCLUDES"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class PathselConfig:
    includes: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)
    use_default_excludes: bool = False


def config_path(base_dir: Path | None = None) -> Path:
    return (base_dir or Path.cwd()).resolve() / CONFIG_FILENAME


def load_config(base_dir: Path | None = None) -> PathselConfig:
    path = config_path(base_dir)
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}. Run `pathsel init` first."
        )

    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a JSON object: {path}")

    return PathselConfig(
        includes=_string_list(data.get("includes"), "includes", path),
        excludes=_string_list(data.get("excludes"), "excludes", path),
        use_default_excludes=bool(data.get("use_default_excludes", False)),
    )


def save_config(config: PathselConfig, base_dir: Path | None = None) -> Path:
    path = config_path(base_dir)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(asdict(config), fh, indent=2)
        fh.write("\n")
    return path


def default_use_default_excludes() -> bool:
    return os.getenv(DEFAULT_EXCLUDES_ENV, "").strip().lower() in _TRUTHY


def _string_list(value: object, key: str, path: Path) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"`{key}` must be a list of strings in {path}")
    return list(value)
