"""
Flask Blueprint for the resource proxy.

Serves: GET /proxy?url=<target>. Fetches the target server-side and streams the
body back unchanged, so the browser can read listing pages and image bytes
from hosts that do not send CORS headers. Responses are marked cacheable for a
long time since remote textures do not change under the same URL.
"""

from typing import Any, Iterator

import requests
from flask import Blueprint, Response, request

from asset_server.server_config import get_cache_max_age, get_proxy_timeout
from utils.Errors import record_error
from utils.Logger import Logger
from utils.url_utils import BROWSER_HEADERS, is_valid_url

proxy_bp = Blueprint("proxy", __name__)

_CHUNK_SIZE = 64 * 1024


def _stream_body(resp: requests.Response) -> Iterator[bytes]:
    """Yield the upstream body in chunks and release the connection when done."""
    try:
        for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
            if chunk:
                yield chunk
    finally:
        resp.close()


@proxy_bp.route("/proxy", methods=["GET"])
def proxy_resource() -> Any:
    """
    Relay the resource at ?url= to the caller.

    Returns 400 when url is missing or not http(s), 502 when the target cannot
    be fetched or answers with a non-2xx status.
    """
    url = request.args.get("url", "").strip()
    if not url or not is_valid_url(url):
        return {"error": "Invalid or missing url"}, 400
    resp = None
    with Logger.scope("proxy"):
        try:
            resp = requests.get(url, headers=BROWSER_HEADERS, stream=True, timeout=get_proxy_timeout())
            resp.raise_for_status()
        except requests.RequestException as e:
            if resp is not None:
                resp.close()
            record_error(url, str(e))
            return {"error": str(e)}, 502

    content_type = resp.headers.get("Content-Type") or "application/octet-stream"
    headers = {
        "Content-Type": content_type,
        "Cache-Control": f"public, max-age={get_cache_max_age()}",
        "Access-Control-Allow-Origin": "*",
    }
    Logger.debug(f"proxy {url} -> {content_type}")
    return Response(_stream_body(resp), status=200, headers=headers)
