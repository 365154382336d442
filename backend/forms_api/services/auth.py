"""Service-to-service authentication.

Tokens are HS256 JWTs carrying ``serviceId`` and ``serviceName``. Every
rejection is logged at INFO with a ``[reasonCode]`` prefix and the code in
``extra["reason"]``; ``authenticate`` itself never raises.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from forms_api.core.config import Settings
from forms_api.schemas.auth import AuthResult, Author, Credentials, ServiceIdentity
from forms_api.services.entitlements import EntitlementClient, EntitlementError, get_default_scopes

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = timedelta(days=90)


# ---------------------------------------------------------------------------
# JWT utilities
# ---------------------------------------------------------------------------


def create_service_token(
    service_id: str,
    service_name: str,
    secret: str,
    *,
    algorithm: str = "HS256",
    lifetime: timedelta = TOKEN_LIFETIME,
    now: datetime | None = None,
) -> str:
    issued = now or datetime.now(UTC)
    payload = {
        "serviceId": service_id,
        "serviceName": service_name,
        "nbf": issued,
        "iat": issued,
        "exp": issued + lifetime,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_service_token(
    token: str,
    secret: str,
    *,
    now: datetime,
    leeway: int = 0,
    algorithm: str = "HS256",
) -> dict[str, Any]:
    """Check the signature and the ``nbf``/``exp`` window against ``now``.

    Raises the matching ``jwt.PyJWTError`` subclass on failure.
    """
    payload = jwt.decode(
        token,
        secret,
        algorithms=[algorithm],
        options={
            "require": ["exp", "nbf"],
            "verify_exp": False,
            "verify_nbf": False,
            "verify_iat": False,
            "verify_aud": False,
            "verify_iss": False,
            "verify_sub": False,
            "verify_jti": False,
        },
    )

    try:
        expires = float(payload["exp"])
        not_before = float(payload["nbf"])
    except (TypeError, ValueError) as exc:
        raise jwt.DecodeError("exp and nbf must be numeric dates") from exc

    timestamp = now.timestamp()
    if expires <= timestamp - leeway:
        raise jwt.ExpiredSignatureError("Signature has expired")
    if not_before > timestamp + leeway:
        raise jwt.ImmatureSignatureError("The token is not yet valid (nbf)")
    return payload


# ---------------------------------------------------------------------------
# Gate
# ---------------------------------------------------------------------------


def _reject(reason: str, message: str) -> AuthResult:
    logger.info("[%s] %s", reason, message, extra={"reason": reason})
    return AuthResult(is_valid=False)


def identify_service(payload: dict[str, Any] | None) -> ServiceIdentity | None:
    if not payload:
        _reject("authMissingPayload", "Cannot authenticate request: token payload is empty")
        return None

    service_id = payload.get("serviceId")
    service_name = payload.get("serviceName")
    # both claims must be non-empty strings
    if not all(isinstance(claim, str) and claim for claim in (service_id, service_name)):
        _reject(
            "authMissingFields",
            f"Cannot authenticate request: token is missing serviceId or serviceName "
            f"(serviceId={service_id!r})",
        )
        return None
    return ServiceIdentity(service_id=service_id, service_name=service_name)


async def authenticate(
    token: str | None,
    *,
    settings: Settings,
    entitlements: EntitlementClient | None = None,
    now: datetime | None = None,
) -> AuthResult:
    """Turn a bearer token into credentials, or an invalid result."""
    if not token:
        return _reject("authMissingToken", "Cannot authenticate request: no bearer token")

    try:
        payload = verify_service_token(
            token,
            settings.JWT_SECRET,
            now=now or datetime.now(UTC),
            leeway=settings.JWT_LEEWAY_SECONDS,
            algorithm=settings.JWT_ALGORITHM,
        )
    except jwt.ExpiredSignatureError:
        return _reject("authTokenExpired", "Cannot authenticate request: token has expired")
    except jwt.PyJWTError as exc:
        return _reject("authInvalidToken", f"Cannot authenticate request: {exc}")

    identity = identify_service(payload)
    if identity is None:
        return AuthResult(is_valid=False)

    if settings.USE_ENTITLEMENT_API:
        if entitlements is None:
            return _reject("authScopeLookupFailed", "Entitlement API enabled but no client configured")
        try:
            scopes = await entitlements.get_scopes(identity.service_id, token)
        except EntitlementError as exc:
            return _reject("authScopeLookupFailed", f"Cannot resolve scopes for {identity.service_id}: {exc}")
    else:
        scopes = get_default_scopes()

    credentials = Credentials(
        user=Author(id=identity.service_id, display_name=identity.service_name),
        scope=tuple(scopes),
    )
    return AuthResult(is_valid=True, credentials=credentials)
