from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from retweet_influence.exceptions import ConfigError


class RunConfig(BaseModel):
    influencers: int = Field(default=3, gt=0)
    generations: int = Field(default=10, gt=0)
    reward_for_inertia: int = Field(default=1, gt=0)
    reward_for_change: int = Field(default=1, gt=0)
    seeding: Literal["one", "all"] = "one"
    find_paths: bool = False
    weighted: bool = False
    output_dir: str = "data/output"


def load_config(path: str | Path) -> RunConfig:
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not read config {path}: {exc}") from exc
    try:
        return RunConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def dump_config(cfg: RunConfig, path: str | Path) -> None:
    path = Path(path)
    path.write_text(yaml.safe_dump(cfg.model_dump(), sort_keys=False))
