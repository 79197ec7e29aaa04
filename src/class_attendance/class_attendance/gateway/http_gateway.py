from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence
from urllib.parse import quote

import requests

from ..attendance.model import AttendanceRecord, SavedMark
from ..core.constants import DEFAULT_API_TIMEOUT
from ..core.exceptions import GatewayError, MalformedResponseError
from ..roster.model import Student
from .parsing import parse_attendance, parse_class_names, parse_students

logger = logging.getLogger(__name__)


@dataclass
class APIConfig:
    base_url: str
    timeout: float = DEFAULT_API_TIMEOUT


class HttpAttendanceGateway:
    """Storage API client implementing both RosterGateway and AttendanceGateway.

    Note: One requests.Session is shared so connections are pooled; every call
    is a short blocking request, the session controller moves it off the loop.
    """

    def __init__(self, config: APIConfig, *, session: Optional[requests.Session] = None):
        self._base_url = config.base_url.rstrip("/")
        self._timeout = config.timeout
        self._http = session or requests.Session()

    # ----- classes -----

    def list_classes(self) -> list[str]:
        return parse_class_names(self._json("GET", "/classes"))

    def create_class(self, name: str) -> None:
        self._request("POST", "/classes", json={"className": name})

    def delete_class(self, name: str) -> None:
        self._request("DELETE", f"/classes/{_segment(name)}")

    # ----- students -----

    def list_students(self, class_name: str) -> list[Student]:
        return parse_students(self._json("GET", f"/classes/{_segment(class_name)}/students"))

    def add_student(self, class_name: str, roll: str, name: str) -> None:
        self._request("POST", f"/classes/{_segment(class_name)}/students", json={"roll": roll, "name": name})

    # ----- attendance -----

    def fetch_attendance(self, class_name: str, date_key: str) -> list[AttendanceRecord]:
        payload = self._json("GET", f"/classes/{_segment(class_name)}/attendance", params={"date": date_key})
        return parse_attendance(payload)

    def save_attendance(self, class_name: str, date_key: str, records: Sequence[SavedMark]) -> None:
        body = {"date": date_key, "records": [r.to_payload() for r in records]}
        self._request("POST", f"/classes/{_segment(class_name)}/attendance", json=body)

    def export_csv(self, class_name: str) -> bytes:
        return self._request("GET", f"/classes/{_segment(class_name)}/download-csv").content

    # ----- transport -----

    def _json(self, method: str, path: str, **kwargs) -> Any:
        resp = self._request(method, path, **kwargs)
        try:
            return resp.json()
        except ValueError:
            raise MalformedResponseError(f"{method} {path} did not return JSON") from None

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self._base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self._http.request(method, url, timeout=self._timeout, **kwargs)
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            logger.error("Storage API %s %s failed with HTTP %s", method, path, status)
            raise GatewayError(f"Storage API answered {status} for {method} {path}") from e
        except requests.RequestException as e:
            logger.error("Storage API %s %s unreachable: %s", method, path, e)
            raise GatewayError(f"Storage API unreachable ({e.__class__.__name__})") from e
        return resp


def _segment(value: str) -> str:
    return quote(value, safe="")
