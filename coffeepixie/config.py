"""Configuration for Coffee Pixie"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
_repo_root = Path(__file__).parent.parent.resolve()
_env_file = _repo_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

# Hardware Platform
SIMULATE_HARDWARE = os.getenv("SIMULATE_HARDWARE", "false").lower() == "true"

# Pin / timer / machine settings live in the JSON config file.
# A missing file is created with defaults on first start.
CONFIG_FILE = os.getenv("CONFIG_FILE", str(_repo_root / "config.json"))

# Web form
WEB_PORT = int(os.getenv("WEB_PORT", "3000"))

# Status LEDs stay lit this long per status pulse
SHOW_STATUS_MS = int(os.getenv("SHOW_STATUS_MS", "2000"))

# Changing trigger time or action while armed reschedules immediately
REARM_ON_CHANGE = os.getenv("REARM_ON_CHANGE", "true").lower() == "true"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "logs/coffeepixie.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024)))  # 5 MB
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "3"))
