"""
Logging configuration for the Eskiz client

This module sets up logging for applications and the CLI, and provides the
structured key=value event line written for every API call.
"""

import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone

MASKED = "***"
_SECRET_KEYS = {"password"}


def setup_logging(log_level=None, log_file=None, max_bytes=10*1024*1024, backup_count=5):
    """
    Set up logging configuration for the Eskiz client.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (if None, logs to stdout)
        max_bytes: Maximum size of log file before rotation (default 10MB)
        backup_count: Number of backup log files to keep (default 5)
    """

    # Default log level from environment or INFO
    if log_level is None:
        log_level = os.environ.get('LOG_LEVEL', 'INFO')
    log_level = log_level.upper()

    # Default log file from environment
    if log_file is None:
        log_file = os.environ.get('LOG_FILE')

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))

    # Clear any existing handlers
    root_logger.handlers.clear()

    if log_file:
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
    else:
        handler = logging.StreamHandler(sys.stdout)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging initialized - Level: {log_level}, Output: {log_file or 'stdout'}")

    return logger


def get_logger(name):
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def mask_secrets(payload):
    """Return a copy of a request payload with secret values masked"""
    if not isinstance(payload, dict):
        return payload
    return {k: (MASKED if k in _SECRET_KEYS else v) for k, v in payload.items()}


def log_api_event(logger, label, success, url, request=None, response=None, error=None):
    """
    Log one API call with structured information.

    Args:
        logger: Logger the client was constructed with
        label: Short operation label (e.g. 'send sms', 'authorization')
        success: Whether the call produced a usable response
        url: Request URL
        request: Request payload, if any
        response: Decoded response, or the raw text when it did not decode
        error: Error message if applicable
    """
    log_data = {
        'operation': label,
        'success': success,
        'url': url,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    }

    if request is not None:
        log_data['request'] = mask_secrets(request)
    if response is not None:
        log_data['response'] = response
    if error:
        log_data['error'] = error

    # Format as key=value pairs for easy parsing
    log_message = ' '.join([f"{k}={v}" for k, v in log_data.items()])

    # A broken sink must never change the outcome of the API call
    try:
        if success:
            logger.info(f"ESKIZ: {log_message}")
        else:
            logger.error(f"ESKIZ: {log_message}")
    except Exception:
        pass
