from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


ENV_DEFAULT_FORMAT = "SHEETHELPER_DEFAULT_FORMAT"
ENV_TIMESTAMP_FORMAT = "SHEETHELPER_TIMESTAMP_FORMAT"
ENV_DEFAULT_FILENAME = "SHEETHELPER_DEFAULT_FILENAME"

DEFAULT_FORMAT = "Xlsx"
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_FILENAME = "excel"


@dataclass(frozen=True)
class Settings:
    default_format: str = DEFAULT_FORMAT
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    default_filename: str = DEFAULT_FILENAME


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Resolve settings.

    Priority:
    1) SHEETHELPER_* variables in env (os.environ when env is None)
    2) Built-in defaults
    Blank variables count as unset.
    """
    source = os.environ if env is None else env

    def _get(name: str, default: str) -> str:
        value = (source.get(name) or "").strip()
        return value or default

    return Settings(
        default_format=_get(ENV_DEFAULT_FORMAT, DEFAULT_FORMAT),
        timestamp_format=_get(ENV_TIMESTAMP_FORMAT, DEFAULT_TIMESTAMP_FORMAT),
        default_filename=_get(ENV_DEFAULT_FILENAME, DEFAULT_FILENAME),
    )
