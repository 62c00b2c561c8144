"""Client for the spreadsheet mirror (a Google Apps Script web app).

The mirror accepts the raw submission JSON on POST and returns every row it
holds as a JSON array on GET. Its column names differ from the local store
(`locality` vs `area`, `pain_points` vs `problems`, ...); callers never
normalise before forwarding and never assume a shape when reading back.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class MirrorError(Exception):
    """Raised when the mirror is unreachable or answers with a failure."""


class SheetMirror:
    def __init__(self, url: Optional[str], timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.url = (url or "").strip()
        self.timeout = timeout
        self._session = session

    @classmethod
    def from_config(cls, config) -> "SheetMirror":
        return cls(config.get("MIRROR_URL"), timeout=config.get("MIRROR_TIMEOUT"))

    @property
    def configured(self) -> bool:
        return bool(self.url)

    @property
    def session(self) -> requests.Session:
        """Lazy session so an unconfigured mirror never opens one."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def forward(self, payload: Dict[str, Any]) -> None:
        if not self.configured:
            raise MirrorError("mirror URL is not configured")
        try:
            resp = self.session.post(
                self.url,
                data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise MirrorError(f"mirror POST failed: {exc}")
        if not resp.ok:
            raise MirrorError(f"mirror responded with status: {resp.status_code}")

    def fetch_records(self) -> List[Dict[str, Any]]:
        if not self.configured:
            raise MirrorError("mirror URL is not configured")
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise MirrorError(f"mirror GET failed: {exc}")
        if not resp.ok:
            raise MirrorError(f"mirror responded with status: {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise MirrorError(f"mirror returned invalid JSON: {exc}")
        if not isinstance(payload, list):
            raise MirrorError("unexpected data format received from mirror")
        return payload

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
