"""
Settings loading.

Settings live in a YAML file (restex/configs/defaults.yaml unless
RESTEX_CONFIG_PATH points elsewhere) and are loaded once with OmegaConf.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import FrozenSet, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "defaults.yaml"


def load_settings(config_path: Optional[Path] = None) -> DictConfig:
    """
    Load settings from YAML, merged over the packaged defaults.

    Args:
        config_path: Optional override file. Keys it defines replace the defaults,
                     everything else is inherited.

    Returns:
        Read-only DictConfig with the merged settings
    """
    settings = OmegaConf.load(DEFAULT_CONFIG_PATH)

    if config_path is not None:
        override = OmegaConf.load(config_path)
        settings = OmegaConf.merge(settings, override)

    OmegaConf.set_readonly(settings, True)
    return settings


@lru_cache(maxsize=1)
def get_settings() -> DictConfig:
    """Settings for this process (RESTEX_CONFIG_PATH override applied, cached)."""
    override = os.getenv("RESTEX_CONFIG_PATH")
    return load_settings(Path(override) if override else None)


def get_empty_sentinels() -> FrozenSet[str]:
    """Strings that mean "no data" wherever they appear as a value."""
    return frozenset(str(value) for value in get_settings().cleaning.empty_sentinels)


def get_logs_path() -> Path:
    """Directory for session logs (LOGS_PATH env var wins over settings)."""
    return Path(os.getenv("LOGS_PATH", get_settings().logging.logs_path))
