import os
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent.parent

CONFIG_DIR = Path(os.environ.get("KIOSK_CONFIG_DIR", PROJECT_ROOT / "config")).resolve()
LOG_DIR = Path(os.environ.get("KIOSK_LOG_DIR", PROJECT_ROOT / "logs")).resolve()

LOCK_FILENAME = ".rotation.lock"


def ensure_dir(path):
    if path:
        os.makedirs(path, exist_ok=True)


def default_config_path():
    return os.environ.get("KIOSK_CONFIG") or os.path.join(CONFIG_DIR, "config.json")


def resolve_log_path(configured, default_name):
    if configured:
        return os.path.abspath(configured)
    return os.path.join(LOG_DIR, default_name)


def resolve_lock_path(settings):
    value = (os.environ.get("KIOSK_LOCK_FILE") or "").strip()
    if value:
        return os.path.abspath(value)
    return os.path.join(settings.local_content_folder, LOCK_FILENAME)
