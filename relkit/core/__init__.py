"""Core domain types and logic."""

from .config import CONFIG_FILE_NAME, ConfigError, ProjectLayout, load_layout
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ProjectLayout",
    "load_layout",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
