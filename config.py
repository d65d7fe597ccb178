from pathlib import Path

# Global Config (filled in by services.file_manager.init_paths)
BASE_FOLDER = None
MEMBERS_FILE = None
EXPORT_FOLDER = None
LOG_FILE = None

# Remembers the chosen data folder between runs
CONFIG_FILE = Path.home() / ".gymroster_config"

# Skips the folder dialog when set
DATA_ENV_VAR = "GYMROSTER_DATA"

MEMBERS_FILENAME = "members.txt"

APP_TITLE = "Fitness Gym Management"

LOG_LEVEL = "INFO"

# Values used when a form field is missing
DEFAULT_DATE = "2023-01-01"
DEFAULT_REMOVAL_REASON = "No reason"
DEFAULT_REFERRAL = "None"
