"""
Logging configuration that keeps backend tokens out of the logs
"""

import logging
import logging.config
import re
from typing import Dict, Any

# X-Vault-Token: <value>  /  "client_token": "<value>"
TOKEN_PATTERN = re.compile(
    r"(?i)(x-vault-token['\"]?\s*[:=]\s*['\"]?|client_token['\"]?\s*[:=]\s*['\"]?)([^'\",\s)]+)"
)
REDACTED = "[REDACTED]"


class TokenRedactionFilter(logging.Filter):
    """Filter to mask token values in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Rewrite the record's message with token values masked."""
        message = record.getMessage()
        redacted = TOKEN_PATTERN.sub(lambda m: m.group(1) + REDACTED, message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True  # Never drop a record


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with token redaction."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "token_redaction_filter": {
                "()": TokenRedactionFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["token_redaction_filter"]
            }
        },
        "loggers": {
            "gatekeeper": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "httpx": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False
            }
        },
        "root": {
            "level": "WARNING",
            "handlers": ["default"]
        }
    }
