from __future__ import annotations

import pytest

from src.chronos_pro.chronos_pro.core.exceptions import AuthorizationError, ValidationError


@pytest.fixture
def failing_app(app):
    def bad_form():
        raise ValidationError("Shift end must be after start")

    def forbidden_page():
        raise AuthorizationError("Kiosk is locked")

    def api_failure():
        raise ValidationError("Bad payload")

    app.add_url_rule("/bad-form", "bad_form", bad_form)
    app.add_url_rule("/forbidden-page", "forbidden_page", forbidden_page)
    app.add_url_rule("/api/failure", "api_failure", api_failure)
    return app


def test_html_domain_errors_are_flashed(failing_app):
    client = failing_app.test_client()

    res = client.get("/bad-form")
    assert res.status_code == 400
    assert b'class="flash warning"' in res.data
    assert b"Shift end must be after start" in res.data

    denied = client.get("/forbidden-page")
    assert denied.status_code == 403
    assert b"Kiosk is locked" in denied.data
    assert b"Access denied" in denied.data


def test_api_domain_errors_stay_json(failing_app):
    res = failing_app.test_client().get("/api/failure")

    assert res.status_code == 400
    assert res.get_json() == {"success": False, "message": "Bad payload"}
