"""
Server-side settings for the texture gateway.

Values come from Args when the process has initialized it (main.py or
python -m asset_server); otherwise the defaults below apply, so the Flask app
can also be imported on its own (tests, WSGI servers).
"""

from pathlib import Path
from typing import Any

from utils.file_utils import find_project_root

DEFAULT_PUBLIC_FOLDER_NAME = "public"
DEFAULT_TARGET_FOLDER = "textures"
DEFAULT_FILE_EXTENSION = "webp"
DEFAULT_PROXY_TIMEOUT = 30
DEFAULT_CACHE_MAX_AGE = 31536000
DEFAULT_MAX_CONTENT_LENGTH = 5000 * 1024 * 1024


def _arg(name: str, default: Any) -> Any:
    """Return Args.<name> when Args is initialized and the value is set, else default."""
    from utils.Args import Args

    if not getattr(Args, "_initialized", False):
        return default
    value = Args.get_config().get(name)
    return default if value is None else value


def get_public_folder_name() -> str:
    return str(_arg("public_folder_name", DEFAULT_PUBLIC_FOLDER_NAME))


def get_asset_root() -> Path:
    """
    Return the directory saved textures are written under.

    Args.asset_root when configured; otherwise the public folder of the nearest
    ancestor of the working directory that has one; otherwise <cwd>/<public>.
    """
    configured = _arg("asset_root", None)
    if configured:
        return Path(configured)
    public = get_public_folder_name()
    project_root = find_project_root(Path.cwd(), public)
    if project_root is None:
        return Path.cwd() / public
    return project_root / public


def get_target_folder() -> str:
    return str(_arg("target_folder", DEFAULT_TARGET_FOLDER))


def get_file_extension() -> str:
    """Extension (without dot) given to every saved file."""
    return str(_arg("file_extension", DEFAULT_FILE_EXTENSION)).lstrip(".")


def get_proxy_timeout() -> float:
    return float(_arg("proxy_timeout", DEFAULT_PROXY_TIMEOUT))


def get_cache_max_age() -> int:
    return int(_arg("cache_max_age", DEFAULT_CACHE_MAX_AGE))


def get_max_content_length() -> int:
    return int(_arg("max_content_length", DEFAULT_MAX_CONTENT_LENGTH))
