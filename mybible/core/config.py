# core/config.py
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env
load_dotenv()


def _default_config_dir() -> Path:
    home = Path.home()
    if sys.platform.startswith("win"):
        return Path(os.getenv("APPDATA", str(home))) / "mybible-cli-py"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / "mybible-cli-py"
    return home / ".config" / "mybible-cli-py"


# ---- ENV VALUES ----
CONFIG_DIR = Path(os.getenv("MYBIBLE_CONFIG_DIR") or _default_config_dir())
MODULES_PATH = Path(os.getenv("MYBIBLE_MODULES_PATH") or CONFIG_DIR / "modules")
DEFAULT_MODULE = os.getenv("MYBIBLE_DEFAULT_MODULE", "")
LOG_LEVEL = os.getenv("MYBIBLE_LOG_LEVEL", "WARNING").upper()

# Gap between consecutive canonical book numbers in MyBible modules
BOOK_STRIDE = int(os.getenv("MYBIBLE_BOOK_STRIDE", "10"))
