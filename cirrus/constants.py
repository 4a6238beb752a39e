"""Centralized constants for Cirrus.

Wire markers, configuration paths and polling defaults are defined here
so the rest of the codebase never hardcodes them.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Jobs API
# =============================================================================

MULTI_TASK_FORMAT: Final = "MULTI_TASK"
DEFAULT_JOB_NAME: Final = "Untitled"


# =============================================================================
# Configuration Files
# =============================================================================

GLOBAL_CONFIG_DIR: Final = ".cirrus"
GLOBAL_CONFIG_NAME: Final = "defaults.toml"
PROJECT_CONFIG_NAME: Final = "cirrus.toml"


# =============================================================================
# Cluster State Polling
# =============================================================================

# Timeouts (in seconds)
DEFAULT_WAIT_TIMEOUT: Final = 1200.0
DEFAULT_WAIT_INTERVAL: Final = 10.0
