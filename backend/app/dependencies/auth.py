"""Dependencies that resolve who is acting on a request.

A bearer token issued at sign-in is the verified path. Without one, the
operator snapshot the browser keeps from sign-in is accepted from the ``user``
header as a JSON object with ``name`` and ``email``, unless the deployment sets
``require_verified_identity``.
"""

import json

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.security import decode_access_token
from backend.app.core.settings import get_settings
from backend.app.db.session import get_db
from backend.app.models.user import GoogleUser


def _user_from_token(db: Session, authorization: str) -> GoogleUser:
    token = authorization.split(" ", 1)[1].strip()
    try:
        # Decode and validate JWT to retrieve subject
        payload = decode_access_token(token)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    user = db.query(GoogleUser).filter(GoogleUser.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def parse_user_snapshot(raw: str | dict | None) -> dict:
    """Turn a client-supplied user object (JSON text or dict) into ``{name, email}``."""
    if raw is None or raw == "":
        raise HTTPException(status_code=400, detail="User information is required")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Invalid user information")
    if not isinstance(raw, dict):
        raise HTTPException(status_code=400, detail="Invalid user information")
    name = str(raw.get("name") or "").strip()
    email = str(raw.get("email") or "").strip()
    if not name or not email:
        raise HTTPException(status_code=400, detail="Invalid user information")
    return {"name": name, "email": email}


def get_verified_user(
    db: Session = Depends(get_db),
    authorization: str | None = Header(default=None),
) -> GoogleUser:
    # Expect Authorization: Bearer <token>
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return _user_from_token(db, authorization)


def get_optional_acting_user(
    db: Session = Depends(get_db),
    authorization: str | None = Header(default=None),
    user: str | None = Header(default=None),
) -> dict | None:
    if authorization and authorization.startswith("Bearer "):
        verified = _user_from_token(db, authorization)
        return {"name": verified.name, "email": verified.email}
    if get_settings().require_verified_identity:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if not user:
        return None
    return parse_user_snapshot(user)


def get_acting_user(actor: dict | None = Depends(get_optional_acting_user)) -> dict:
    if actor is None:
        raise HTTPException(status_code=400, detail="User information is required")
    return actor


def get_optional_verified_user(
    db: Session = Depends(get_db),
    authorization: str | None = Header(default=None),
) -> GoogleUser | None:
    if authorization and authorization.startswith("Bearer "):
        return _user_from_token(db, authorization)
    if get_settings().require_verified_identity:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return None
