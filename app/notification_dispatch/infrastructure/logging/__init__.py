"""Structured logging infrastructure.

Public API:
    - configure_logging(): Initialize logging
    - get_logger(): Get a logger instance with a specific name
    - get_module_logger(): Get a logger for the calling module
    - bind_request_context(): Context manager for request-scoped logging
    - get_correlation_id() / set_correlation_id() / clear_request_context()

Example:
    from notification_dispatch.infrastructure.logging import get_module_logger

    logger = get_module_logger()
    logger.info("sms_sent", notification_id="abc")
"""

from notification_dispatch.infrastructure.logging.setup import (
    configure_logging,
    get_logger,
    get_module_logger,
)
from notification_dispatch.infrastructure.logging.context import (
    bind_request_context,
    clear_request_context,
    get_correlation_id,
    set_correlation_id,
)
from notification_dispatch.infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    add_environment_info,
    mask_sensitive_data,
    truncate_large_values,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "get_module_logger",
    "bind_request_context",
    "get_correlation_id",
    "set_correlation_id",
    "clear_request_context",
    "add_app_info",
    "mask_sensitive_data",
    "truncate_large_values",
    "add_environment_info",
    "SENSITIVE_PATTERNS",
]
