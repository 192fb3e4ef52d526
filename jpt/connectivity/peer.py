import requests
from typing import Any, Dict, Optional


class PeerClient:
    """Blocking HTTP client for the peer service's /data endpoint"""

    def __init__(self, base_url: str, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def data_url(self) -> str:
        return f"{self.base_url}/data"

    def fetch_data(self) -> Dict[str, Any]:
        """
        GET <peer>/data and return the decoded JSON object.

        Raises requests.RequestException for connection errors and non-2xx
        statuses, and ValueError when the body is not a JSON object.
        """
        response = self.session.get(self.data_url, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object from {self.data_url}, got {type(payload).__name__}")
        return payload

    def close(self):
        self.session.close()
