"""Centralized path definitions for the numberdesk application.

Every file the application writes lives below a single base directory,
``~/.numberdesk`` by default. Set ``NUMBERDESK_HOME`` to relocate it.
"""

import os
from pathlib import Path

# Base application directory
NUMBERDESK_DIR = Path(os.environ.get("NUMBERDESK_HOME", Path.home() / ".numberdesk"))

# Subdirectories
LOGS_DIR = NUMBERDESK_DIR / "logs"

# Specific files
CONFIG_PATH = NUMBERDESK_DIR / "config.json"
