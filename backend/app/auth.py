# backend/app/auth.py
from __future__ import annotations

from typing import Any, Optional

import jwt  # PyJWT
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .domain.errors import AuthenticationError
from .models import AppUser
from .schemas import UserUpsert
from .services.user_service import upsert_user


def _claim(claims: dict[str, Any], *keys: str) -> Optional[str]:
    for k in keys:
        v = claims.get(k)
        if v is not None and str(v).strip():
            return str(v).strip()
    return None


def _jwt_verify(token: str) -> dict[str, Any]:
    options = {"verify_aud": bool(settings.jwt_audience)}
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid token")


def _actor_from_token(db: Session, token: str) -> AppUser:
    claims = _jwt_verify(token)
    sub = _claim(claims, "sub")
    if not sub:
        raise AuthenticationError("Token missing sub")

    # The identity provider owns profile fields; refresh them on every request
    return upsert_user(
        db,
        UserUpsert(
            id=sub,
            email=_claim(claims, "email"),
            first_name=_claim(claims, "first_name", "given_name"),
            last_name=_claim(claims, "last_name", "family_name"),
            profile_image_url=_claim(claims, "profile_image_url", "picture"),
        ),
    )


def _dev_actor(db: Session, user_id: Optional[str]) -> AppUser:
    uid = (user_id or "").strip() or settings.dev_user_id

    user = db.get(AppUser, uid)
    if user is not None:
        return user

    if uid == settings.dev_user_id:
        payload = UserUpsert(
            id=uid,
            email=settings.dev_user_email,
            first_name=settings.dev_user_first_name,
            last_name=settings.dev_user_last_name,
            role=settings.dev_user_role,
        )
    else:
        payload = UserUpsert(id=uid)
    return upsert_user(db, payload)


def get_actor(
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> AppUser:
    """
    The acting user for this request.

    Modes (settings.auth_mode):
      - jwt: Authorization: Bearer <token> from the identity provider, user upserted from claims
      - dev: fixed local identity, overridable per request via settings.dev_header_user_id
    """
    mode = (settings.auth_mode or "").strip().lower()

    if mode == "jwt":
        token = None
        if authorization and str(authorization).lower().startswith("bearer "):
            token = str(authorization).split(" ", 1)[1].strip()
        if not token:
            raise AuthenticationError()
        return _actor_from_token(db, token)

    if mode == "dev":
        return _dev_actor(db, request.headers.get(settings.dev_header_user_id))

    raise AuthenticationError()
