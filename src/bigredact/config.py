#!/usr/bin/env python3
"""
BigRedact - Configuration Module

This module contains all configuration constants and paths used by the application.
"""

import logging
import os
import sys
from typing import Final

from bigredact.utils.i18n import _

# ============================================================================
# Application Constants
# ============================================================================

APP_NAME: Final[str] = "Big Redact"
APP_ID: Final[str] = "br.com.biglinux.bigredact"
APP_VERSION: Final[str] = "1.0.0"
APP_DESCRIPTION: Final[str] = _("Rotate, annotate and redact document pages")
APP_WEBSITE: Final[str] = "https://www.biglinux.com.br"


# ============================================================================
# Environment Detection
# ============================================================================

IS_DEVELOPMENT: Final[bool] = not getattr(sys, "frozen", False)


# ============================================================================
# Configuration Directory
# ============================================================================

CONFIG_DIR: Final[str] = os.path.expanduser("~/.config/bigredact")
CONFIG_FILE_PATH: Final[str] = os.path.join(CONFIG_DIR, "settings.json")


# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL: int = logging.INFO
LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOGGER_NAME: Final[str] = "BigRedact"


# ============================================================================
# Ingest
# ============================================================================

IMAGE_EXTENSIONS: Final[tuple[str, ...]] = (
    ".jpg",
    ".jpeg",
    ".png",
    ".webp",
    ".tif",
    ".tiff",
    ".bmp",
)
PDF_EXTENSIONS: Final[tuple[str, ...]] = (".pdf",)


def set_debug(enabled: bool) -> None:
    """Switch the application log level between DEBUG and INFO."""
    global LOG_LEVEL

    LOG_LEVEL = logging.DEBUG if enabled else logging.INFO
    logging.getLogger(LOGGER_NAME).setLevel(LOG_LEVEL)
