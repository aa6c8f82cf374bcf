"""Runtime defaults for the grouping engine.

Values come from ``TRAVELMATCH_*`` environment variables (a ``.env`` file in
the working directory is honoured) and fall back to the model defaults.
"""

from __future__ import annotations

import logging
import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TRAVELMATCH_"

Linkage = Literal["single", "complete", "average"]


class EngineSettings(BaseModel):
    """Tunable defaults for clustering and conflict detection."""

    target_group_size: int = Field(default=6, ge=1)
    max_groups: int = Field(default=10, ge=1)
    num_groups: int = Field(default=3, ge=1)
    max_iterations: int = Field(default=100, ge=1)
    tolerance: float = Field(default=0.001, gt=0)
    linkage: Linkage = "average"
    sigma: float = Field(default=50.0, gt=0)
    max_seeds: int = Field(default=10, ge=1)
    seed: int | None = None
    include_minor_conflicts: bool = True


def load_settings(use_dotenv: bool = True) -> EngineSettings:
    """Build ``EngineSettings`` from the environment.

    Args:
        use_dotenv: Load a ``.env`` file before reading variables.

    Returns:
        EngineSettings with environment overrides applied.

    Raises:
        ValueError: If a ``TRAVELMATCH_*`` value fails validation.
    """
    if use_dotenv:
        load_dotenv()

    overrides: dict[str, str] = {}
    for name in EngineSettings.model_fields:
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}", "")
        if raw:
            overrides[name] = raw

    try:
        settings = EngineSettings(**overrides)
    except ValidationError as exc:
        bad = ", ".join(f"{ENV_PREFIX}{str(err['loc'][0]).upper()}" for err in exc.errors())
        raise ValueError(f"Invalid engine settings in environment: {bad}") from exc

    if overrides:
        logger.info("Engine settings overridden from environment: %s", ", ".join(sorted(overrides)))
    return settings
