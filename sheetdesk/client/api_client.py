# sheetdesk/client/api_client.py

from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from ..core.config import settings


class ClientError(Exception):
    """Non-2xx answer from the SheetDesk API, or the API could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SheetDeskClient:
    """
    Thin `requests` wrapper around the SheetDesk HTTP API.

    Every call returns the decoded JSON body; failures raise ClientError with
    the server's `detail` message when there is one.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = 60, session=None):
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ClientError(f"Request to {url} failed: {e}") from e

        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = None
            detail = body.get("detail", resp.text) if isinstance(body, dict) else resp.text
            raise ClientError(str(detail), status_code=resp.status_code)

        return resp.json()

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def list_datasets(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/datasets")

    def fetch_rows(self, dataset_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", "/rows", params={"dataset_id": dataset_id})

    def upload(self, path: Path) -> Dict[str, Any]:
        path = Path(path)
        with path.open("rb") as f:
            return self._request("POST", "/upload", files={"file": (path.name, f)})

    def delete_dataset(self, dataset_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/datasets/{dataset_id}")
