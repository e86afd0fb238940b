"""
Core module initialization.
"""

from rollbook.core.config import (
    AppConfig,
    get_config,
    get_data_file_path,
    get_log_path,
    load_config,
    reset_config,
)
from rollbook.core.exceptions import (
    BatchRejectedError,
    ConfigurationError,
    DataLoadingError,
    DuplicateEntityError,
    EmptyGroupError,
    EntityNotFoundError,
    InvalidRangeError,
    InvalidStatusError,
    OverlappingConsultationError,
    ParseError,
    RollbookError,
    SameGroupError,
)
from rollbook.core.logging import get_logger, setup_logging

__all__ = [
    "AppConfig",
    "get_config",
    "get_data_file_path",
    "get_log_path",
    "load_config",
    "reset_config",
    "get_logger",
    "setup_logging",
    # Errors
    "RollbookError",
    "DuplicateEntityError",
    "EntityNotFoundError",
    "SameGroupError",
    "InvalidRangeError",
    "InvalidStatusError",
    "OverlappingConsultationError",
    "EmptyGroupError",
    "BatchRejectedError",
    "ParseError",
    "DataLoadingError",
    "ConfigurationError",
]
