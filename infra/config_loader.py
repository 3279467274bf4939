# infra/config_loader.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from infra.config import RunConfig


def _load_raw(path: Path) -> dict:
    """
    Load a raw dict from a YAML or JSON file.
    """
    text = path.read_text(encoding="utf-8")

    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        raw = yaml.safe_load(text) or {}
    elif suffix == ".json":
        raw = json.loads(text)
    else:
        raise ValueError(f"Unsupported config format: {path} (use .yaml/.yml or .json)")

    if not isinstance(raw, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    return raw


def _resolve_trade_paths(raw: dict, base_dir: Path) -> dict:
    """
    Relative trade file paths are taken relative to the config file.
    """
    for acc in raw.get("accounts") or []:
        trades = acc.get("trades") if isinstance(acc, dict) else None
        if isinstance(trades, dict) and isinstance(trades.get("path"), str):
            p = Path(trades["path"])
            if not p.is_absolute():
                trades["path"] = str(base_dir / p)
    return raw


def load_run_config(path: Union[str, Path]) -> RunConfig:
    """
    Load a RunConfig from the given YAML/JSON file.

    Example:
        cfg = load_run_config('config/challenge_run.yml')
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Config file not found: {p}")

    raw = _resolve_trade_paths(_load_raw(p), p.resolve().parent)
    try:
        return RunConfig.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed for {p}:\n{exc}") from exc
