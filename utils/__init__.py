"""
Utility modules for the letter-pair lookup tool
"""

from .logging_config import (
    setup_logging,
    get_contextual_logger,
    log_api_request,
    log_parse_summary,
    log_cache_operation,
    init_from_environment
)

__all__ = [
    'setup_logging',
    'get_contextual_logger',
    'log_api_request',
    'log_parse_summary',
    'log_cache_operation',
    'init_from_environment'
]
