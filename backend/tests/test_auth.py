import json
import logging
from datetime import UTC, datetime, timedelta

import httpx
import jwt
import pytest

from forms_api.services.auth import (
    authenticate,
    create_service_token,
    identify_service,
    verify_service_token,
)
from forms_api.services.entitlements import DEFAULT_SCOPES, EntitlementClient

SECRET = "test-secret"
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
AUTH_LOGGER = "forms_api.services.auth"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _token(**claims) -> str:
    payload = {
        "serviceId": "forms-designer",
        "serviceName": "Forms Designer",
        "nbf": NOW - timedelta(minutes=1),
        "exp": NOW + timedelta(hours=1),
    }
    payload.update(claims)
    return jwt.encode({k: v for k, v in payload.items() if v is not None}, SECRET, algorithm="HS256")


def _raw_token(**claims) -> str:
    """Sign claims as-is, without the claim checks jwt.encode applies."""
    payload = {
        "serviceId": "forms-designer",
        "serviceName": "Forms Designer",
        "nbf": int((NOW - timedelta(minutes=1)).timestamp()),
        "exp": int((NOW + timedelta(hours=1)).timestamp()),
        **claims,
    }
    return jwt.api_jws.encode(json.dumps(payload).encode(), SECRET, algorithm="HS256")


def _entitlements(handler) -> EntitlementClient:
    return EntitlementClient("http://entitlements.test", transport=httpx.MockTransport(handler))


def _reasons(caplog) -> list[str]:
    return [getattr(record, "reason", None) for record in caplog.records if record.name == AUTH_LOGGER]


# ---------------------------------------------------------------------------
# verify_service_token
# ---------------------------------------------------------------------------


class TestVerifyServiceToken:
    def test_valid_token(self):
        token = create_service_token("forms-designer", "Forms Designer", SECRET, now=NOW)
        payload = verify_service_token(token, SECRET, now=NOW + timedelta(days=1))
        assert payload["serviceId"] == "forms-designer"
        assert payload["serviceName"] == "Forms Designer"

    def test_token_lasts_ninety_days(self):
        token = create_service_token("svc", "Service", SECRET, now=NOW)
        verify_service_token(token, SECRET, now=NOW + timedelta(days=89))
        with pytest.raises(jwt.ExpiredSignatureError):
            verify_service_token(token, SECRET, now=NOW + timedelta(days=90))

    def test_not_yet_valid(self):
        token = create_service_token("svc", "Service", SECRET, now=NOW)
        with pytest.raises(jwt.ImmatureSignatureError):
            verify_service_token(token, SECRET, now=NOW - timedelta(minutes=5))

    def test_leeway_applies_to_both_bounds(self):
        token = create_service_token("svc", "Service", SECRET, now=NOW, lifetime=timedelta(minutes=10))
        verify_service_token(token, SECRET, now=NOW - timedelta(seconds=30), leeway=60)
        verify_service_token(token, SECRET, now=NOW + timedelta(minutes=10, seconds=30), leeway=60)

    def test_wrong_secret(self):
        with pytest.raises(jwt.InvalidSignatureError):
            verify_service_token(_token(), "other-secret", now=NOW)

    def test_exp_and_nbf_required(self):
        with pytest.raises(jwt.MissingRequiredClaimError):
            verify_service_token(_token(exp=None), SECRET, now=NOW)
        with pytest.raises(jwt.MissingRequiredClaimError):
            verify_service_token(_token(nbf=None), SECRET, now=NOW)

    def test_audience_and_issuer_ignored(self):
        payload = verify_service_token(_token(aud="someone-else", iss="elsewhere", sub="x"), SECRET, now=NOW)
        assert payload["aud"] == "someone-else"

    def test_subject_and_jwt_id_unchecked(self):
        payload = verify_service_token(_raw_token(sub=123, jti=456), SECRET, now=NOW)
        assert payload["sub"] == 123
        assert payload["serviceId"] == "forms-designer"


# ---------------------------------------------------------------------------
# identify_service
# ---------------------------------------------------------------------------


class TestIdentifyService:
    def test_identity_from_payload(self):
        identity = identify_service({"serviceId": "svc", "serviceName": "Service"})
        assert identity.service_id == "svc"
        assert identity.service_name == "Service"

    @pytest.mark.parametrize("payload", [None, {}])
    def test_missing_payload(self, payload, caplog):
        with caplog.at_level(logging.INFO, logger=AUTH_LOGGER):
            assert identify_service(payload) is None
        assert _reasons(caplog) == ["authMissingPayload"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"serviceId": "svc"},
            {"serviceName": "Service"},
            {"serviceId": "", "serviceName": "Service"},
            {"other": "claim"},
            {"serviceId": {"id": "svc"}, "serviceName": "Service"},
            {"serviceId": "svc", "serviceName": 42},
        ],
    )
    def test_missing_fields(self, payload, caplog):
        with caplog.at_level(logging.INFO, logger=AUTH_LOGGER):
            assert identify_service(payload) is None
        record = caplog.records[-1]
        assert record.reason == "authMissingFields"
        assert record.getMessage().startswith("[authMissingFields]")
        assert record.levelno == logging.INFO


# ---------------------------------------------------------------------------
# authenticate
# ---------------------------------------------------------------------------


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_valid_token_yields_credentials(self, settings):
        result = await authenticate(_token(), settings=settings, now=NOW)
        assert result.is_valid is True
        assert result.credentials.user.id == "forms-designer"
        assert result.credentials.user.display_name == "Forms Designer"
        assert result.credentials.scope == DEFAULT_SCOPES

    @pytest.mark.asyncio
    async def test_numeric_subject_admitted(self, settings):
        result = await authenticate(_raw_token(sub=123), settings=settings, now=NOW)
        assert result.is_valid is True
        assert result.credentials.user.id == "forms-designer"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token(self, token, settings, caplog):
        with caplog.at_level(logging.INFO, logger=AUTH_LOGGER):
            result = await authenticate(token, settings=settings, now=NOW)
        assert result.is_valid is False
        assert result.credentials is None
        assert _reasons(caplog) == ["authMissingToken"]

    @pytest.mark.asyncio
    async def test_expired_token(self, settings, caplog):
        with caplog.at_level(logging.INFO, logger=AUTH_LOGGER):
            result = await authenticate(_token(), settings=settings, now=NOW + timedelta(days=1))
        assert result.is_valid is False
        assert _reasons(caplog) == ["authTokenExpired"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["not-a-jwt", jwt.encode({"serviceId": "x"}, "other", algorithm="HS256")])
    async def test_malformed_token_never_raises(self, token, settings, caplog):
        with caplog.at_level(logging.INFO, logger=AUTH_LOGGER):
            result = await authenticate(token, settings=settings, now=NOW)
        assert result.is_valid is False
        assert _reasons(caplog) == ["authInvalidToken"]

    @pytest.mark.asyncio
    async def test_missing_service_name(self, settings, caplog):
        with caplog.at_level(logging.INFO, logger=AUTH_LOGGER):
            result = await authenticate(_token(serviceName=None), settings=settings, now=NOW)
        assert result.is_valid is False
        assert _reasons(caplog) == ["authMissingFields"]

    @pytest.mark.asyncio
    async def test_scopes_from_entitlement_api(self, settings):
        token = _token()
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={"entity": {"scopes": ["form-read"]}})

        result = await authenticate(
            token,
            settings=settings.model_copy(update={"USE_ENTITLEMENT_API": True}),
            entitlements=_entitlements(handler),
            now=NOW,
        )
        assert result.is_valid is True
        assert result.credentials.scope == ("form-read",)
        assert seen == {"path": "/users/forms-designer", "auth": f"Bearer {token}"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, text="boom"),
            httpx.Response(200, json={"unexpected": True}),
            httpx.Response(200, json={"entity": {"scopes": "form-read"}}),
        ],
    )
    async def test_entitlement_failure_fails_closed(self, response, settings, caplog):
        with caplog.at_level(logging.INFO, logger=AUTH_LOGGER):
            result = await authenticate(
                _token(),
                settings=settings.model_copy(update={"USE_ENTITLEMENT_API": True}),
                entitlements=_entitlements(lambda request: response),
                now=NOW,
            )
        assert result.is_valid is False
        assert _reasons(caplog) == ["authScopeLookupFailed"]

    @pytest.mark.asyncio
    async def test_entitlement_unreachable(self, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await authenticate(
            _token(),
            settings=settings.model_copy(update={"USE_ENTITLEMENT_API": True}),
            entitlements=_entitlements(handler),
            now=NOW,
        )
        assert result.is_valid is False


# ---------------------------------------------------------------------------
# HTTP gate
# ---------------------------------------------------------------------------


FORM_PAYLOAD = {
    "title": "Register a boat",
    "organisation": "Defra",
    "teamName": "Forms team",
    "teamEmail": "forms@example.gov.uk",
}


class TestHttpGate:
    def test_missing_bearer_is_401(self, client):
        resp = client.post("/forms", json=FORM_PAYLOAD)
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"
        assert resp.json()["error"] == "Unauthorized"

    def test_bad_token_is_401(self, client):
        resp = client.post("/forms", json=FORM_PAYLOAD, headers={"Authorization": "Bearer nonsense"})
        assert resp.status_code == 401

    def test_token_signed_with_other_secret_is_401(self, client):
        token = create_service_token("svc", "Service", "other-secret")
        resp = client.get("/forms", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_public_routes_need_no_token(self, client, form_id):
        assert client.get(f"/forms/{form_id}").status_code == 200
        assert client.get(f"/forms/{form_id}/definition/draft").status_code == 200
        assert client.get("/forms/slugs").status_code == 200

    def test_listing_requires_token(self, client):
        assert client.get("/forms").status_code == 401

    def test_missing_scope_is_403(self, settings, make_client, auth_headers):
        read_only = _entitlements(lambda request: httpx.Response(200, json={"entity": {"scopes": ["form-read"]}}))
        client = make_client(
            settings.model_copy(update={"USE_ENTITLEMENT_API": True}),
            entitlement_client=read_only,
        )

        assert client.get("/forms", headers=auth_headers).status_code == 200

        resp = client.post("/forms", json=FORM_PAYLOAD, headers=auth_headers)
        assert resp.status_code == 403
        assert "form-edit" in resp.json()["message"]

    def test_publish_scope_checked_separately(self, settings, make_client, auth_headers):
        editor = _entitlements(lambda request: httpx.Response(200, json={"entity": {"scopes": ["form-edit"]}}))
        client = make_client(
            settings.model_copy(update={"USE_ENTITLEMENT_API": True}),
            entitlement_client=editor,
        )

        form_id = client.post("/forms", json=FORM_PAYLOAD, headers=auth_headers).json()["id"]
        assert client.post(f"/forms/{form_id}/create-live", headers=auth_headers).status_code == 403
        assert client.delete(f"/forms/{form_id}", headers=auth_headers).status_code == 403
