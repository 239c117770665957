# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BulkDeleteConfig:
    """
    Configuration settings for the bulk delete workflow.

    :param http_retries: Maximum number of attempts for HTTP requests made by the REST adapter (default: 5).
    :type http_retries: int or None
    :param http_backoff: Base delay in seconds for exponential backoff (default: 0.5).
    :type http_backoff: float or None
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param logger_name: Name of the logger that receives batch and lookup events.
    :type logger_name: str
    :param log_level: Level applied to that logger, or None to leave it untouched.
    :type log_level: str or None
    """

    http_retries: Optional[int] = None
    http_backoff: Optional[float] = None
    http_timeout: Optional[float] = None

    logger_name: str = "BulkDelete"
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls) -> "BulkDeleteConfig":
        """
        Create a configuration instance with default settings.

        :return: Configuration instance with default values.
        :rtype: ~BulkDelete.core.config.BulkDeleteConfig
        """
        # Environment-free defaults
        return cls(
            http_retries=None,  # Will default to 5 in _HttpClient
            http_backoff=None,  # Will default to 0.5 in _HttpClient
            http_timeout=None,  # Will use method-dependent defaults in _HttpClient
        )

    def get_logger(self) -> logging.Logger:
        """Return the configured logger, applying ``log_level`` when set."""
        logger = logging.getLogger(self.logger_name)
        if self.log_level:
            logger.setLevel(getattr(logging, self.log_level.upper()))
        return logger
