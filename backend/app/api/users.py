"""Google sign-in bookkeeping and the operator directory."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from backend.app.core.security import create_access_token
from backend.app.core.time import utc_now
from backend.app.db.session import get_db
from backend.app.models.user import GoogleUser
from backend.app.schemas.user import GoogleUserRead, GoogleUserSummary, GoogleUserUpsert, SignInResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[GoogleUserSummary])
async def list_users(db: Session = Depends(get_db)):
    return db.query(GoogleUser).order_by(GoogleUser.name.asc()).all()


@router.post("", response_model=SignInResponse)
async def sign_in(user_in: GoogleUserUpsert, db: Session = Depends(get_db)):
    if not user_in.id or not user_in.email or not user_in.name:
        raise HTTPException(status_code=400, detail="Missing required fields")

    user = db.query(GoogleUser).filter(GoogleUser.uid == user_in.id).first()
    if user is None:
        taken = db.query(GoogleUser).filter(GoogleUser.email == user_in.email).first()
        if taken:
            raise HTTPException(status_code=400, detail="Email already registered")
        user = GoogleUser(uid=user_in.id, email=user_in.email, name=user_in.name, photo_url=user_in.photo_url)
        db.add(user)
        logger.info("new operator signed in", extra={"actor": user_in.email})
    else:
        user.name = user_in.name
        user.email = user_in.email
        if user_in.photo_url:
            user.photo_url = user_in.photo_url
    user.last_login = utc_now()
    db.commit()
    db.refresh(user)

    token = create_access_token(user.id, user.email, user.name)
    profile = GoogleUserRead.model_validate(user).model_dump()
    return SignInResponse(**profile, access_token=token)
