"""
Flask Blueprint for saving textures under the asset root.

Serves: POST /download-texture with JSON (or form) {targetFolder, fileName, imageUrl}.
imageUrl is either a data:image/...;base64 URI, decoded in place, or a remote
URL that the server fetches. The bytes are written, unconverted, to
<asset_root>/<target_folder>/<targetFolder>/<fileName>.<extension>; an
existing file of that name is overwritten.
"""

import base64
import binascii
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from flask import Blueprint, request

from asset_server.server_config import (
    get_asset_root,
    get_file_extension,
    get_proxy_timeout,
    get_target_folder,
)
from utils.Errors import record_error
from utils.Logger import Logger
from utils.file_utils import sanitize_filename, write_asset_file
from utils.url_utils import BROWSER_HEADERS, is_data_image_uri, is_valid_url

save_bp = Blueprint("save", __name__)

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

_DATA_URI_SEPARATOR = ";base64,"


def decode_data_uri(image_url: str) -> bytes:
    """
    Return the bytes encoded in a data:image/...;base64,<payload> URI.

    Raises:
        ValueError: If the URI has no base64 payload or the payload is malformed.
    """
    _header, sep, payload = image_url.partition(_DATA_URI_SEPARATOR)
    if not sep:
        raise ValueError("Data URI is not base64 encoded")
    # Unpadded payloads are accepted
    payload = payload.strip()
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def fetch_image_bytes(image_url: str) -> bytes:
    """
    Fetch a remote image.

    Raises:
        ValueError: If image_url is not http(s).
        requests.RequestException: On network failure or a non-2xx response.
    """
    if not is_valid_url(image_url):
        raise ValueError(f"Unsupported image URL: {image_url}")
    resp = requests.get(image_url, headers=BROWSER_HEADERS, timeout=get_proxy_timeout())
    resp.raise_for_status()
    return resp.content


def resolve_destination(texture_type: str, file_name: str) -> Path:
    """
    Return the file path a save lands on.

    Both names are sanitized so neither can climb out of the target folder.

    Raises:
        ValueError: If either name has no usable characters left (e.g. "..").
    """
    folder = sanitize_filename(texture_type, fallback="")
    name = sanitize_filename(file_name, fallback="")
    if not folder or not name:
        raise ValueError(f"Unusable file name: {texture_type}/{file_name}")
    return get_asset_root() / get_target_folder() / folder / f"{name}.{get_file_extension()}"


def _request_payload() -> Dict[str, Any]:
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return {key: request.form.get(key) for key in ("targetFolder", "textureType", "fileName", "imageUrl")}


def _text(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    return str(value).strip() or None


@save_bp.route("/download-texture", methods=["POST", "OPTIONS"], strict_slashes=False)
def download_texture() -> Any:
    """
    Persist one texture.

    Returns 400 {success: false} when imageUrl is missing or a name sanitizes
    to nothing, 500 {success: false, error} when decoding, fetching or writing
    fails, else {success: true, path}.
    """
    if request.method == "OPTIONS":
        return "", 204, _CORS_HEADERS

    data = _request_payload()
    image_url = _text(data, "imageUrl")
    if not image_url:
        return {"success": False, "error": "imageUrl required"}, 400, _CORS_HEADERS

    # textureType is the older name of targetFolder; fileName falls back to the folder name.
    texture_type = _text(data, "targetFolder") or _text(data, "textureType") or "textures"
    file_name = _text(data, "fileName") or texture_type

    try:
        dest = resolve_destination(texture_type, file_name)
    except ValueError as e:
        return {"success": False, "error": str(e)}, 400, _CORS_HEADERS

    with Logger.scope("download-texture"):
        try:
            if is_data_image_uri(image_url):
                body = decode_data_uri(image_url)
            else:
                body = fetch_image_bytes(image_url)
            dest = write_asset_file(dest, body)
        except (ValueError, OSError, requests.RequestException) as e:
            record_error(f"{texture_type}/{file_name}", str(e))
            return {"success": False, "error": str(e)}, 500, _CORS_HEADERS
        except Exception as e:
            record_error(f"{texture_type}/{file_name}", str(e), with_traceback=True)
            return {"success": False, "error": str(e)}, 500, _CORS_HEADERS
        Logger.info(f"Saved texture {dest} ({len(body)} bytes)")

    return {"success": True, "path": str(dest)}, 200, _CORS_HEADERS
