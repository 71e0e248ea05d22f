import os
import sys
from pathlib import Path
from dotenv import load_dotenv
from appdirs import user_data_dir, user_config_dir

# Constants
APP_NAME = "CV Aligner"

# Project root (source dev mode). In bundled (PyInstaller) mode, resources are under sys._MEIPASS.
def _source_project_root() -> Path:
	return Path(__file__).resolve().parent.parent

def resource_path(relative_path: str) -> Path:
	"""Return a Path to a bundled resource (PyInstaller) or source path (dev)."""
	base = getattr(sys, "_MEIPASS", None)
	if base:
		return Path(base) / relative_path
	return _source_project_root() / relative_path

# Load .env in dev mode (from repository root) for convenience
_DEV_ENV = _source_project_root() / ".env"
if _DEV_ENV.exists():
	load_dotenv(_DEV_ENV)

def _env_int(name: str, default: int) -> int:
	raw = (os.getenv(name) or "").strip()
	if not raw:
		return default
	try:
		return int(raw)
	except ValueError:
		print(f"[warn] {name}={raw!r} is not an integer; using {default}")
		return default

# Per-user writable locations
USER_DATA_DIR = Path(user_data_dir(APP_NAME))
USER_DATA_DIR.mkdir(parents=True, exist_ok=True)

USER_CONFIG_DIR = Path(user_config_dir(APP_NAME))
USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)

# Optional overrides for the house style (colours, brand text, fonts)
HOUSE_STYLE_PATH = USER_CONFIG_DIR / "house_style.json"

# Resource directories (bundled-safe)
ASSETS_DIR = resource_path("assets")

# Brand logo; composition proceeds without it when the file is absent
LOGO_PATH = Path(os.getenv("CV_ALIGNER_LOGO_PATH") or ASSETS_DIR / "logo.png")

# Writable output directory for generated documents
OUTPUT_DIR = Path(os.getenv("CV_ALIGNER_OUTPUT_DIR") or USER_DATA_DIR / "output")
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Generated files older than this are removed by the periodic cleanup
OUTPUT_MAX_AGE_SECONDS = _env_int("CV_ALIGNER_OUTPUT_MAX_AGE", 60 * 60)
CLEANUP_INTERVAL_SECONDS = _env_int("CV_ALIGNER_CLEANUP_INTERVAL", 60 * 60)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Increment per release
APP_VERSION = "0.1.0"

# Launcher bind address; PORT falls back to an OS-assigned one when taken
HOST = os.getenv("CV_ALIGNER_HOST") or "127.0.0.1"
PORT = _env_int("PORT", 3000)
