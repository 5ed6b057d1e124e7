# -*- coding: utf-8 -*-
"""
Utility functions and constants for dsoplot.

- Logging configuration and management
- Default settings
- JavaScript payloads for the calling page
- Helper process execution and timing

See Also
--------
dsoplot.util.logging : Logging configuration
dsoplot.util.js : Payloads returned to the web page
"""

from .defaults import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_LOGLEVEL,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    SINGLE_LINE_ERR_LOG,
    TEST_LOGLEVEL,
)
from .logging import (
    clear_log,
    format_error_response,
    get_log_filename,
    log_default_path,
    shutdown_log,
    start_log,
)
