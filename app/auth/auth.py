"""JWT bearer token authentication against an OpenID Connect provider.

Tokens are validated with the signing keys published in the provider's JWKS
and the caller must be an active member of the team directory. The
token_required dependency should be used on all protected endpoints.
"""

from datetime import datetime
from typing import Annotated

import jwt
import pytz
import requests
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import settings
from repositories.team_repository import TeamRepository


def get_openid_config() -> dict:
    """Fetch OpenID Connect configuration from the identity provider.

    Returns:
        dict: The OpenID configuration containing endpoints and settings.

    Raises:
        HTTPException: If the configuration cannot be fetched.
    """
    if not settings.openid_config_url:
        raise HTTPException(status_code=500, detail="OIDC configuration URL not set")
    resp = requests.get(settings.openid_config_url, timeout=10)
    if resp.status_code != 200:
        raise HTTPException(status_code=500, detail="Failed to fetch OpenID config")
    return resp.json()


def get_signing_key(kid: str, jwks: dict):
    """Extract the signing key matching the key ID from JWKS.

    Args:
        kid: Key ID from the JWT header.
        jwks: JSON Web Key Set from the identity provider.

    Returns:
        The RSA public key for signature verification, or None if not found.
    """
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return jwt.algorithms.RSAAlgorithm.from_jwk(key)
    return None


def validate_token(token: str, db: Session) -> dict:
    """Validate a JWT token and resolve the calling team member.

    Args:
        token: The JWT token string to validate.
        db: Database session for the member lookup.

    Returns:
        dict containing user_id, email, and decoded token.

    Raises:
        HTTPException: For various authentication failures.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication Token is missing!",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        openid_config = get_openid_config()
        jwks_uri = openid_config.get("jwks_uri")
        if not jwks_uri:
            raise HTTPException(status_code=500, detail="JWKS URI missing in OIDC config")
        jwks = requests.get(jwks_uri, timeout=10).json()

        unverified_header = jwt.get_unverified_header(token)
        kid = unverified_header.get("kid")
        if not kid:
            raise HTTPException(status_code=401, detail="Invalid token: Missing Key ID (kid)")

        signing_key = get_signing_key(kid, jwks)
        if not signing_key:
            raise HTTPException(status_code=401, detail="Invalid token: Key not found in JWKS")

        decoded_token = jwt.decode(
            token,
            signing_key,
            algorithms=["RS256"],
            audience=settings.valid_audience,
            issuer=settings.valid_issuer,
        )

        app_id = decoded_token.get("appid")
        tid = decoded_token.get("tid")
        if (settings.client_id and app_id != settings.client_id) or (
            settings.tenant_id and tid != settings.tenant_id
        ):
            raise HTTPException(status_code=401, detail="Invalid token: Unauthorized app or tenant")

        tz = pytz.timezone(settings.timezone)
        if datetime.now(tz) > datetime.fromtimestamp(decoded_token["exp"], tz):
            raise HTTPException(status_code=401, detail="Authentication Token Has Expired!")

        email = decoded_token.get("unique_name") or decoded_token.get("preferred_username")
        if not email:
            raise HTTPException(status_code=401, detail="Invalid Token: unique_name missing")

        member = TeamRepository(db).get_member_by_email(email)
        if member is None or not member.is_active:
            raise HTTPException(status_code=401, detail="Invalid Token")

        return {
            "user_id": member.id,
            "email": member.email,
            "token": decoded_token,
        }
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(status_code=401, detail="Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=f"Token validation failed: {str(e)}") from e
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Authentication error: {str(e)}") from e


def token_required(
    authorization: Annotated[str | None, Header()] = None,
    db: Annotated[Session, Depends(get_db)] = None,
) -> dict:
    """FastAPI dependency for requiring valid authentication.

    Args:
        authorization: The Authorization header value.
        db: Database session (injected).

    Returns:
        dict containing user_id, email, and decoded token.

    Raises:
        HTTPException: If authentication fails.
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing or malformed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization.split(" ", 1)[1].strip()
    return validate_token(token, db)
