"""Default dataset loaded when no usable snapshot exists.

Config source: config/seed.yaml
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..common.config import CONFIG_DIR
from ..common.models import LedgerState

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = CONFIG_DIR / "seed.yaml"


def load_seed(seed_path: str | Path | None = None) -> LedgerState:
    """Build a fresh ledger state from the seed YAML.

    A missing seed file yields an empty state.
    """
    path = Path(seed_path) if seed_path else DEFAULT_SEED_PATH
    if not path.exists():
        logger.warning("Seed file %s not found, starting empty", path)
        return LedgerState()

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    state = LedgerState.model_validate(data)
    logger.info(
        "Loaded seed data: %d units, %d maintenance records",
        len(state.compressors), len(state.maintenance_logs),
    )
    return state
