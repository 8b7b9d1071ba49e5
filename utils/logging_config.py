"""
Structured JSON Logging Configuration for the letter-pair lookup tool

- Machine-readable JSON format for log analysis
- Contextual information (ctx_* fields) for debugging fetch and cache issues
- Standard log levels with human-readable messages
"""

import logging
import json
import sys
import os
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pathlib import Path


class JSONFormatter(logging.Formatter):
    """
    Custom formatter that outputs structured JSON logs

    Every ``ctx_``-prefixed attribute on the record is copied into the
    entry without its prefix.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON"""

        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'thread': record.thread,
            'process': record.process
        }

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        for key, value in record.__dict__.items():
            if key.startswith('ctx_'):
                log_entry[key[4:]] = value

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds contextual information to log records

    Allows attaching things like the sheet category or cache path to every
    message emitted through the adapter.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Add context to log record"""

        extra = kwargs.get('extra', {})

        for key, value in self.extra.items():
            extra[f'ctx_{key}'] = value

        kwargs['extra'] = extra
        return msg, kwargs


def setup_logging(
    log_level: str = 'INFO',
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_json: bool = True
) -> None:
    """
    Setup structured logging configuration

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (None = no file logging)
        enable_console: Whether to enable console logging
        enable_json: Whether to use JSON formatting
    """

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

    if enable_json:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if enable_console:
        # stdout is reserved for command output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    configure_application_loggers()


def configure_application_loggers():
    """Configure application-specific loggers with appropriate levels"""

    # External library loggers (reduce noise)
    external_loggers = {
        'requests': logging.WARNING,
        'urllib3': logging.WARNING,
        'httpx': logging.WARNING,
        'uvicorn.access': logging.WARNING,
    }

    for logger_name, level in external_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def get_contextual_logger(name: str, **context) -> ContextAdapter:
    """
    Get a logger with contextual information

    Args:
        name: Logger name
        **context: Contextual key-value pairs

    Returns:
        Logger adapter with context

    Example:
        logger = get_contextual_logger('lookup.acquisition', category='corner')
        logger.info("Parsed sheet")
    """
    base_logger = logging.getLogger(name)
    return ContextAdapter(base_logger, context)


def log_api_request(
    logger: logging.Logger,
    method: str,
    url: str,
    status_code: int,
    response_time: float,
    byte_count: Optional[int] = None,
    error: Optional[str] = None
) -> None:
    """
    Log a sheet request with standardized fields for analysis

    Args:
        logger: Logger instance
        method: HTTP method
        url: Request URL
        status_code: HTTP status code (0 when no response was received)
        response_time: Response time in seconds
        byte_count: Size of the response body
        error: Error message if request failed
    """

    success = 200 <= status_code < 300
    log_data = {
        'extra': {
            'ctx_api_method': method,
            'ctx_api_url': url,
            'ctx_api_status': status_code,
            'ctx_api_response_time': response_time,
            'ctx_api_success': success
        }
    }

    if byte_count is not None:
        log_data['extra']['ctx_api_bytes'] = byte_count

    if error:
        log_data['extra']['ctx_api_error'] = error

    if success:
        message = f"Sheet request successful: {method} {url}"
        if byte_count is not None:
            message += f" ({byte_count:,} bytes)"
        logger.info(message, **log_data)
    else:
        message = f"Sheet request failed: {method} {url} [{status_code}]"
        if error:
            message += f" - {error}"
        logger.warning(message, **log_data)


def log_parse_summary(
    logger: logging.Logger,
    category: str,
    accepted: int,
    discarded: int,
    keys: int
) -> None:
    """
    Log the outcome of parsing one sheet

    Args:
        logger: Logger instance
        category: Sheet category tag
        accepted: Rows stored in the index
        discarded: Malformed or rejected rows
        keys: Distinct letter pairs
    """

    log_data = {
        'extra': {
            'ctx_parse_category': category,
            'ctx_parse_accepted': accepted,
            'ctx_parse_discarded': discarded,
            'ctx_parse_keys': keys
        }
    }

    message = f"Parsed {category} sheet: {accepted:,} rows, {keys:,} pairs, {discarded:,} discarded"
    if discarded:
        logger.warning(message, **log_data)
    else:
        logger.info(message, **log_data)


def log_cache_operation(
    logger: logging.Logger,
    operation: str,
    path: str,
    entry_count: int,
    duration: float,
    success: bool = True,
    error: Optional[str] = None
) -> None:
    """
    Log cache reads and writes with timing

    Args:
        logger: Logger instance
        operation: Cache operation (SAVE, LOAD, CLEAR)
        path: Cache database path
        entry_count: Number of entries across both sheets
        duration: Operation duration in seconds
        success: Whether operation succeeded
        error: Error message if operation failed
    """

    log_data = {
        'extra': {
            'ctx_cache_operation': operation,
            'ctx_cache_path': path,
            'ctx_cache_entry_count': entry_count,
            'ctx_cache_duration': duration,
            'ctx_cache_success': success
        }
    }

    if error:
        log_data['extra']['ctx_cache_error'] = error

    if success:
        message = f"Cache {operation} completed: {entry_count} entries in {path} ({duration:.3f}s)"
        logger.info(message, **log_data)
    else:
        message = f"Cache {operation} failed: {path} - {error}"
        logger.warning(message, **log_data)


def init_from_environment():
    """Initialize logging configuration from environment variables"""

    log_level = os.getenv('LOG_LEVEL', 'INFO')
    log_file = os.getenv('LOG_FILE', './logs/lookup.log')
    enable_json = os.getenv('LOG_FORMAT', 'json').lower() == 'json'

    setup_logging(
        log_level=log_level,
        log_file=log_file or None,
        enable_console=True,
        enable_json=enable_json
    )
