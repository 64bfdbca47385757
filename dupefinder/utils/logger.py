"""Sanitized logging helpers for dupefinder.

Context passed as keyword arguments is serialized to JSON and scrubbed of
credentials, emails and URLs before it is written, since result titles and
links coming from indexers often embed API keys.
"""
import json
import logging
import re
from typing import Any

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('dupefinder')


def sanitize_text(text: str) -> str:
    """Remove sensitive information from text.

    Args:
        text: Input text that may contain sensitive data

    Returns:
        Sanitized text with sensitive patterns replaced
    """
    if not text:
        return text

    # Email addresses
    text = re.sub(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}', '<email>', text)

    # Indexer API keys passed as query parameters
    text = re.sub(r'(apikey|api_key|r|passkey)=[a-zA-Z0-9]{16,}', r'\1=<api-key>', text, flags=re.IGNORECASE)

    # URLs with potential sensitive data
    text = re.sub(r'https?://[^\s"]+', '<url>', text)

    # Long hex strings (likely hashes or tokens)
    text = re.sub(r'\b[0-9a-f]{32,}\b', '<hash>', text, flags=re.IGNORECASE)

    return text


def safe_json(obj: Any, max_length: int = 1000) -> str:
    """Safely serialize object to JSON with sensitive data sanitized.

    Args:
        obj: Object to serialize
        max_length: Maximum length of output string

    Returns:
        Sanitized JSON string
    """
    try:
        json_str = json.dumps(obj, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return "<unable to serialize>"

    sanitized = sanitize_text(json_str)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "... [truncated]"
    return sanitized


def configure_logging(level: str = "INFO", fmt: str | None = None) -> None:
    """Apply level and format from configuration to the dupefinder logger."""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if fmt:
        formatter = logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')
        for handler in logging.getLogger().handlers:
            handler.setFormatter(formatter)


def log_info(message: str, **kwargs) -> None:
    """Log info message with optional sanitized context."""
    if kwargs:
        logger.info(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.info(message)


def log_warning(message: str, **kwargs) -> None:
    """Log warning message with optional sanitized context."""
    if kwargs:
        logger.warning(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.warning(message)


def log_error(message: str, **kwargs) -> None:
    """Log error message with optional sanitized context."""
    if kwargs:
        logger.error(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.error(message)


def log_debug(message: str, **kwargs) -> None:
    """Log debug message with optional sanitized context."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if kwargs:
        logger.debug(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.debug(message)


def log_detection_summary(result_count: int, elapsed_ms: float, duplicates: int, **kwargs) -> None:
    """Log the outcome of one duplicate detection run.

    Args:
        result_count: Number of result items that went in
        elapsed_ms: Wall time of the detection in milliseconds
        duplicates: Number of items placed into an existing cluster
        **kwargs: Additional context
    """
    log_info("Duplicate detection finished",
             result_count=result_count,
             elapsed_ms=round(elapsed_ms, 2),
             duplicates_found=duplicates,
             **kwargs)
