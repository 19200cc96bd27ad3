from fastapi import APIRouter, Depends, Form, HTTPException, status
from sqlalchemy.orm import Session

from medtrack.db.deps import get_db
from medtrack.schemas.auth import RegisterRequest, TokenResponse
from medtrack.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    try:
        token = auth_service.register(db, payload.email, payload.password, payload.full_name)
        return TokenResponse(access_token=token)
    except auth_service.AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/login", response_model=TokenResponse)
def login(
    email: str | None = Form(None),
    username: str | None = Form(None),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    try:
        login_email = email or username
        if not login_email:
            raise auth_service.AuthError("Email is required")
        token = auth_service.login(db, login_email, password)
        return TokenResponse(access_token=token)
    except auth_service.AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
