from __future__ import annotations
import os
import tomllib
from pathlib import Path
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError

USER_CFG = Path.home() / ".config" / "process-testgen" / "config.toml"
PROJECT_CFG_NAME = "process-testgen.toml"

ENV_PREFIX = "PROCESS_TESTGEN_"


class GeneratorSettings(BaseModel):
    """Limits and strategy for one generation run."""
    strategy: Literal["auto", "heuristic"] = Field("auto",
        description="'auto' tries exact enumeration first; 'heuristic' skips it")
    max_paths: int = Field(10000, gt=0, description="Simple paths allowed per condition before falling back")
    max_depth: Optional[int] = Field(None, gt=0, description="Maximum path length in connections")
    max_expansions: int = Field(200000, gt=0,
        description="Edges the enumeration may step onto per condition before falling back")
    workers: int = Field(4, ge=1, description="Threads used for exact search across conditions")


DEFAULTS: Dict[str, object] = GeneratorSettings().model_dump()


def _read_toml(path: Path) -> Dict:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def _coerce(name: str, v):
    if v is None:
        return None
    if name in {"max_paths", "max_expansions", "workers"}:
        return int(v)
    if name == "max_depth":
        s = str(v).strip().lower()
        return None if s in {"", "none"} else int(v)
    return v


def _env_overrides() -> Dict:
    env = {}
    for name in DEFAULTS:
        raw = os.getenv(ENV_PREFIX + name.upper())
        if raw is None:
            continue
        try:
            env[name] = _coerce(name, raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e
    return env


def load_settings(
    project_dir: Optional[Path] = None,
    user_config: Optional[Path] = None,
    overrides: Optional[Dict] = None
) -> GeneratorSettings:
    """
    Merge settings: defaults -> user file -> project file -> environment -> overrides.

    ``overrides`` typically carries CLI flags; None values are ignored.
    """
    cfg_user = _read_toml(user_config or USER_CFG)
    cfg_proj = _read_toml((project_dir or Path.cwd()) / PROJECT_CFG_NAME)

    settings = dict(DEFAULTS)

    def overlay(d: Dict):
        if not isinstance(d, dict):
            return
        for k in settings.keys():
            if k in d and d[k] is not None:
                settings[k] = d[k]

    overlay(cfg_user)
    overlay(cfg_proj)
    overlay(_env_overrides())
    overlay(overrides or {})

    try:
        return GeneratorSettings(**settings)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid generator settings: {e}") from e
