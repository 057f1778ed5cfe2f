"""Validator configuration model and loader.

Captures uxassert.yaml fields with defaults, then layers environment
variables and CLI overrides on top.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

CONFIG_FILENAME = "uxassert.yaml"

Persona = Literal["ux-designer", "qa-engineer", "none"]
Strategy = Literal["two-pass", "batch", "single", "agentic"]

PERSONAS: tuple[str, ...] = ("ux-designer", "qa-engineer", "none")
STRATEGIES: tuple[str, ...] = ("two-pass", "batch", "single", "agentic")


class ValidatorConfig(BaseModel):
    """Run configuration for a validation."""

    model_config = {"extra": "forbid"}

    adapter: str = "anthropic"
    model: str = "claude-sonnet-4-5"
    max_tokens: int = Field(default=8192, ge=1)
    temperature: float | None = None
    fps: float = Field(default=1.0, gt=0)
    persona: Persona = "ux-designer"
    strategy: Strategy = "two-pass"
    max_frames_per_request: int = Field(default=20, ge=1)
    max_agent_turns: int = Field(default=10, ge=1)


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from start (default: cwd) looking for uxassert.yaml.

    Returns:
        Path to the config file, or None if none is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def _env_overrides(environ: dict[str, str]) -> dict[str, Any]:
    """Read UXASSERT_* environment overrides, ignoring unusable values."""
    overrides: dict[str, Any] = {}

    raw_fps = environ.get("UXASSERT_FPS")
    if raw_fps:
        try:
            fps = float(raw_fps)
        except ValueError:
            fps = 0.0
        if fps > 0:
            overrides["fps"] = fps

    persona = environ.get("UXASSERT_PERSONA", "").lower()
    if persona in PERSONAS:
        overrides["persona"] = persona

    strategy = environ.get("UXASSERT_STRATEGY", "").lower()
    if strategy in STRATEGIES:
        overrides["strategy"] = strategy

    model = environ.get("UXASSERT_MODEL")
    if model:
        overrides["model"] = model

    return overrides


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    environ: dict[str, str] | None = None,
) -> ValidatorConfig:
    """Resolve the effective configuration.

    Resolution order (lowest to highest): defaults, config file,
    environment, explicit overrides. Overrides whose value is None are
    skipped so unset CLI options do not clobber the file.

    Args:
        config_path: Path to a YAML config file. If None, searched for
            with find_config_file().
        overrides: Values from the CLI.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Validated ValidatorConfig instance.

    Raises:
        pydantic.ValidationError: If the merged values are invalid.
    """
    if config_path is None:
        config_path = find_config_file()

    data: dict[str, Any] = {}
    if config_path is not None and config_path.exists():
        import yaml

        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        if raw is not None:
            if not isinstance(raw, dict):
                raise ValueError(f"{config_path} must contain a mapping at the top level")
            data.update(raw)

    data.update(_env_overrides(dict(os.environ) if environ is None else environ))

    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})

    return ValidatorConfig.model_validate(data)
