"""
HTTP client for the texture gateway server.

Every remote request the browser makes goes through the gateway: listings and
asset bytes via GET /proxy, saves via POST /download-texture. Host and port
are injected (Args.host / Args.port come from VITE_DEV_SERVER_IP and
VITE_TEXTURE_BROWSER_SERVER_PORT); nothing here hardcodes an address.
"""

from typing import Any, Dict, Optional

import requests

from utils.Errors import GatewayError
from utils.url_utils import access_url, build_proxy_url, is_data_image_uri, with_token


class GatewayClient:
    """Talks to one gateway server instance."""

    def __init__(
        self,
        host: str,
        port: int,
        *,
        scheme: str = "http",
        timeout: float = 30,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Args:
            host: Gateway host (e.g. 127.0.0.1).
            port: Gateway port.
            scheme: http or https.
            timeout: Per-request timeout in seconds.
            token: Optional token appended as ?token= to remote store URLs.
            session: requests.Session to reuse (a new one is created if None).
        """
        self._base_url = f"{scheme}://{host}:{port}"
        self._timeout = timeout
        self._token = token
        self._session = session or requests.Session()

    @classmethod
    def from_args(cls) -> "GatewayClient":
        """Build a client from the initialized Args (host, port, proxy_timeout, browse_token)."""
        from utils.Args import Args

        return cls(
            Args.host,
            Args.port,
            timeout=Args.proxy_timeout,
            token=Args.browse_token,
        )

    @property
    def base_url(self) -> str:
        """Gateway root URL, e.g. http://127.0.0.1:8081."""
        return self._base_url

    def proxy_url(self, target_url: str) -> str:
        """Return the /proxy URL that relays target_url (with the store token, if any)."""
        return build_proxy_url(self._base_url, with_token(target_url, self._token))

    def fetch(self, target_url: str) -> requests.Response:
        """
        Fetch target_url through the proxy.

        Raises:
            GatewayError: On network failure or a non-2xx response (the proxy maps
                remote failures to 502).
        """
        url = self.proxy_url(target_url)
        try:
            resp = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise GatewayError(f"Request for {target_url} failed: {exc}", url=target_url) from exc
        if not 200 <= resp.status_code < 300:
            raise GatewayError(
                f"Failed to fetch {target_url}: HTTP {resp.status_code}",
                url=target_url,
                status_code=resp.status_code,
            )
        return resp

    def fetch_text(self, target_url: str) -> str:
        """Fetch target_url through the proxy and return the decoded body."""
        return self.fetch(target_url).text

    def fetch_bytes(self, target_url: str) -> bytes:
        """Fetch target_url through the proxy and return the raw body."""
        return self.fetch(target_url).content

    def save_asset(self, target_folder: str, file_name: str, image_url: str) -> Dict[str, Any]:
        """
        Ask the gateway to persist an asset under its asset root.

        Args:
            target_folder: Destination folder name (below the configured target folder).
            file_name: File name without extension; the server appends its configured one.
            image_url: Remote URL or data:image/...;base64 URI.

        Returns:
            The server's JSON payload ({"success": bool, "error"?: str, "path"?: str}).

        Raises:
            GatewayError: If the server cannot be reached or does not answer with JSON.
        """
        if not is_data_image_uri(image_url):
            image_url = with_token(image_url, self._token)
        payload = {
            "targetFolder": target_folder,
            "fileName": file_name,
            "imageUrl": image_url,
        }
        url = f"{self._base_url}/download-texture"
        try:
            resp = self._session.post(url, json=payload, timeout=self._timeout)
        except requests.RequestException as exc:
            raise GatewayError(f"Save request failed: {exc}", url=url) from exc
        try:
            return resp.json()
        except ValueError as exc:
            raise GatewayError(
                f"Save request returned HTTP {resp.status_code} without JSON",
                url=url,
                status_code=resp.status_code,
            ) from exc

    def check(self) -> bool:
        """Return True if the gateway answers GET /check with 200."""
        ok, _status = access_url(f"{self._base_url}/check", timeout=int(self._timeout))
        return ok
