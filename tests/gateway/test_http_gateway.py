from __future__ import annotations

import json

import pytest
import requests

from src.class_attendance.class_attendance.attendance.model import SavedMark
from src.class_attendance.class_attendance.core.enums import MarkStatus
from src.class_attendance.class_attendance.core.exceptions import GatewayError, MalformedResponseError
from src.class_attendance.class_attendance.gateway.http_gateway import APIConfig, HttpAttendanceGateway
from src.class_attendance.class_attendance.roster.model import Student


def make_response(status: int = 200, body=None, raw: bytes | None = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    if raw is not None:
        resp._content = raw
    else:
        resp._content = json.dumps(body).encode("utf-8") if body is not None else b""
    return resp


class FakeHttpSession:
    def __init__(self, *responses):
        self._responses = list(responses)
        self.sent: list[dict] = []

    def request(self, method, url, **kwargs):
        self.sent.append({"method": method, "url": url, **kwargs})
        answer = self._responses.pop(0)
        if isinstance(answer, Exception):
            raise answer
        answer.url = url
        return answer


def make_gateway(*responses) -> tuple[HttpAttendanceGateway, FakeHttpSession]:
    http = FakeHttpSession(*responses)
    gateway = HttpAttendanceGateway(APIConfig(base_url="http://api.test/", timeout=3), session=http)
    return gateway, http


def test_list_students_encodes_class_name_in_path():
    gateway, http = make_gateway(make_response(body=[{"roll": 1, "name": "Ann"}]))

    students = gateway.list_students("Grade 5/B")

    assert students == [Student(roll="1", name="Ann")]
    assert http.sent[0]["method"] == "GET"
    assert http.sent[0]["url"] == "http://api.test/classes/Grade%205%2FB/students"
    assert http.sent[0]["timeout"] == 3


def test_fetch_attendance_sends_date_param():
    gateway, http = make_gateway(make_response(body=[{"roll": "1", "name": "Ann", "status": "A"}]))

    records = gateway.fetch_attendance("Grade 5", "2024-03-01")

    assert records[0].status == MarkStatus.ABSENT
    assert http.sent[0]["params"] == {"date": "2024-03-01"}


def test_save_attendance_posts_date_and_records():
    gateway, http = make_gateway(make_response(body={"ok": True}))

    gateway.save_attendance(
        "Grade 5",
        "2024-03-01",
        [SavedMark(roll="1", status=MarkStatus.PRESENT), SavedMark(roll="2", status=MarkStatus.UNMARKED)],
    )

    assert http.sent[0]["method"] == "POST"
    assert http.sent[0]["json"] == {
        "date": "2024-03-01",
        "records": [{"roll": "1", "status": "P"}, {"roll": "2", "status": ""}],
    }


def test_create_and_delete_class():
    gateway, http = make_gateway(make_response(body={"ok": True}), make_response(status=204))

    gateway.create_class("Grade 7")
    gateway.delete_class("Grade 7")

    assert http.sent[0]["json"] == {"className": "Grade 7"}
    assert (http.sent[1]["method"], http.sent[1]["url"]) == ("DELETE", "http://api.test/classes/Grade%207")


def test_add_student_posts_roll_and_name():
    gateway, http = make_gateway(make_response(body={"ok": True}))

    gateway.add_student("Grade 5", "3", "Cy")

    assert http.sent[0]["json"] == {"roll": "3", "name": "Cy"}


def test_export_csv_returns_raw_bytes():
    gateway, _ = make_gateway(make_response(raw=b"roll,name\n1,Ann\n"))

    assert gateway.export_csv("Grade 5") == b"roll,name\n1,Ann\n"


def test_http_error_becomes_gateway_error():
    gateway, _ = make_gateway(make_response(status=500, body={"error": "boom"}))

    with pytest.raises(GatewayError):
        gateway.list_classes()


def test_connection_error_becomes_gateway_error():
    gateway, _ = make_gateway(requests.ConnectionError("refused"))

    with pytest.raises(GatewayError):
        gateway.list_classes()


def test_non_json_body_is_malformed():
    gateway, _ = make_gateway(make_response(raw=b"<html>oops</html>"))

    with pytest.raises(MalformedResponseError):
        gateway.list_classes()
