import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from unilite.mock_origin import router
from unilite.mock_origin.route import (
    INVALID_CAPTCHA_MESSAGE,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_VALUE,
)
from unilite.vars import MOCK_CAPTCHA_CODE


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app, follow_redirects=False)


def test_without_cookie_access_is_denied(client):
    response = client.get("/mock-erp")
    assert response.status_code == 200
    assert "Access Denied" in response.text
    assert "/mock-erp?login_page=true" in response.text


def test_login_page_shows_captcha_code(client):
    response = client.get("/mock-erp", params={"login_page": "true"})
    assert f"CAPTCHA: {MOCK_CAPTCHA_CODE}" in response.text
    assert 'type="password"' in response.text
    assert "{code}" not in response.text


def test_wrong_captcha_rejected(client):
    response = client.post("/mock-login", data={"user": "a", "pass": "b", "captcha": "0000"})
    assert response.status_code == 200
    assert response.text == INVALID_CAPTCHA_MESSAGE
    assert SESSION_COOKIE_NAME not in response.cookies


def test_correct_captcha_sets_cookie_and_redirects(client):
    response = client.post(
        "/mock-login", data={"user": "a", "pass": "b", "captcha": MOCK_CAPTCHA_CODE}
    )
    assert response.status_code == 302
    assert response.headers["location"] == "/mock-erp"
    set_cookie = response.headers["set-cookie"]
    assert f"{SESSION_COOKIE_NAME}={SESSION_COOKIE_VALUE}" in set_cookie
    assert "httponly" in set_cookie.lower()


def test_dashboard_served_with_cookie(client):
    client.cookies.set(SESSION_COOKIE_NAME, SESSION_COOKIE_VALUE)
    response = client.get("/mock-erp")
    assert "Student Portal Dashboard" in response.text
    assert "Academic Progress" in response.text
