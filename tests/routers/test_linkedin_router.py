"""Tests for the LinkedIn OAuth helper endpoints."""

from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse

import pytest

from blogsync.core.errors import TransportError
from blogsync.core.settings import get_settings
from blogsync.main import app
from blogsync.routers import linkedin


@pytest.fixture
def oauth_settings(client, settings):
    settings.linkedin_client_id = "client-1"
    settings.linkedin_client_secret = "shh"
    app.dependency_overrides[get_settings] = lambda: settings
    return settings


@pytest.fixture
def oauth_state(client):
    client.cookies.set(linkedin.STATE_COOKIE, "state-1")
    return "state-1"


def test_auth_redirects_to_linkedin(client, oauth_settings):
    response = client.get("/api/linkedin/auth", follow_redirects=False)

    assert response.status_code == 307
    location = urlparse(response.headers["location"])
    assert location.netloc == "www.linkedin.com"
    params = parse_qs(location.query)
    assert params["client_id"] == ["client-1"]
    assert params["scope"] == ["openid profile w_member_social"]
    assert params["redirect_uri"] == ["http://testserver/api/linkedin/callback"]
    assert response.cookies[linkedin.STATE_COOKIE] == params["state"][0]


def test_auth_requires_client_id(client, oauth_settings):
    oauth_settings.linkedin_client_id = None

    response = client.get("/api/linkedin/auth", follow_redirects=False)

    assert response.status_code == 400


def test_callback_returns_credentials(client, oauth_settings, oauth_state, monkeypatch):
    exchange = Mock(
        return_value={"access_token": "tok", "expires_in": 5184000, "token_type": "Bearer"}
    )
    monkeypatch.setattr(linkedin, "exchange_oauth_code", exchange)
    monkeypatch.setattr(linkedin, "fetch_person_id", Mock(return_value="person-9"))

    response = client.get("/api/linkedin/callback", params={"code": "abc", "state": oauth_state})

    assert response.status_code == 200
    body = response.json()
    assert body["LINKEDIN_ACCESS_TOKEN"] == "tok"
    assert body["LINKEDIN_PERSON_URN"] == "person-9"
    assert body["expires_in_days"] == 60
    assert exchange.call_args.kwargs["code"] == "abc"
    assert exchange.call_args.kwargs["redirect_uri"] == "http://testserver/api/linkedin/callback"


def test_auth_then_callback_round_trip(client, oauth_settings, monkeypatch):
    monkeypatch.setattr(
        linkedin, "exchange_oauth_code", Mock(return_value={"access_token": "tok"})
    )
    monkeypatch.setattr(linkedin, "fetch_person_id", Mock(return_value="person-9"))

    redirect = client.get("/api/linkedin/auth", follow_redirects=False)
    state = parse_qs(urlparse(redirect.headers["location"]).query)["state"][0]
    response = client.get("/api/linkedin/callback", params={"code": "abc", "state": state})

    assert response.status_code == 200
    assert response.json()["LINKEDIN_ACCESS_TOKEN"] == "tok"


def test_callback_keeps_token_when_profile_lookup_fails(
    client, oauth_settings, oauth_state, monkeypatch
):
    monkeypatch.setattr(
        linkedin, "exchange_oauth_code", Mock(return_value={"access_token": "tok"})
    )
    monkeypatch.setattr(
        linkedin,
        "fetch_person_id",
        Mock(side_effect=TransportError("Profile lookup failed: 403", status_code=403)),
    )

    response = client.get("/api/linkedin/callback", params={"code": "abc", "state": oauth_state})

    assert response.status_code == 200
    body = response.json()
    assert body["LINKEDIN_ACCESS_TOKEN"] == "tok"
    assert body["LINKEDIN_PERSON_URN"] == ""


@pytest.mark.parametrize("state", [None, "forged"])
def test_callback_rejects_bad_state(client, oauth_settings, oauth_state, monkeypatch, state):
    exchange = Mock(return_value={"access_token": "tok"})
    monkeypatch.setattr(linkedin, "exchange_oauth_code", exchange)
    params = {"code": "abc"}
    if state:
        params["state"] = state

    response = client.get("/api/linkedin/callback", params=params)

    assert response.status_code == 400
    assert "state" in response.json()["detail"]
    exchange.assert_not_called()


def test_callback_without_state_cookie(client, oauth_settings, monkeypatch):
    exchange = Mock(return_value={"access_token": "tok"})
    monkeypatch.setattr(linkedin, "exchange_oauth_code", exchange)

    response = client.get("/api/linkedin/callback", params={"code": "abc", "state": "state-1"})

    assert response.status_code == 400
    exchange.assert_not_called()


def test_callback_without_code(client, oauth_settings):
    assert client.get("/api/linkedin/callback").status_code == 400


def test_callback_reports_provider_error(client, oauth_settings):
    response = client.get(
        "/api/linkedin/callback",
        params={"error": "user_cancelled_login", "error_description": "The user cancelled"},
    )
    assert response.status_code == 400
    assert "The user cancelled" in response.json()["detail"]


def test_callback_exchange_failure(client, oauth_settings, oauth_state, monkeypatch):
    monkeypatch.setattr(
        linkedin,
        "exchange_oauth_code",
        Mock(side_effect=TransportError("Token exchange failed: invalid_grant", status_code=400)),
    )

    response = client.get("/api/linkedin/callback", params={"code": "abc", "state": oauth_state})

    assert response.status_code == 400
    assert "invalid_grant" in response.json()["detail"]
