# config.py

"""
Settings for the calculator and logging set-up.

Values come from, in increasing priority: the field defaults, BIGCALC_*
environment variables (a .env file is loaded first), and explicit overrides
passed by the command line.
"""

import logging
import os
import sys
from typing import Any, Dict

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .compiler import DEFAULT_POOL_CAPACITY
from .interpreter import DEFAULT_STACK_CAPACITY

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

ENV_PREFIX = "BIGCALC_"

DEFAULT_HISTORY_FILE = "~/.bigcalc_history"


class Settings(BaseModel):
    """Validated calculator settings."""
    pool_capacity: int = Field(DEFAULT_POOL_CAPACITY, ge=1, description="Maximum integer literals per expression")
    stack_capacity: int = Field(DEFAULT_STACK_CAPACITY, ge=1, description="Maximum depth of the value stack")
    history_file: str = Field(DEFAULT_HISTORY_FILE, validate_default=True,
                              description="File used for the REPL's line history")
    log_level: str = "WARNING"
    color: bool = True
    debug: bool = False

    @field_validator('history_file')
    @classmethod
    def expand_history_file(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('History file cannot be empty')
        return os.path.expanduser(v.strip())

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level: {v}')
        return level

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


def _settings_from_env() -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name in Settings.model_fields:
        raw = os.getenv(ENV_PREFIX + name.upper())
        if raw is not None:
            values[name] = raw
    return values


def load_settings(**overrides: Any) -> Settings:
    """
    Build Settings from the environment and ``overrides``.

    Overrides whose value is None are ignored, so argparse results can be
    passed straight through.

    Raises:
        pydantic.ValidationError: if any value is invalid.
    """
    load_dotenv()
    values = _settings_from_env()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging with the project's format."""
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT, force=True)


def lift_int_digit_limit() -> None:
    """Allow printing ints of any length (Python 3.11+ limits int/str conversion)."""
    if hasattr(sys, "set_int_max_str_digits"):
        sys.set_int_max_str_digits(0)
