from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from wellness_api.db import get_db
from wellness_api.models import User
from wellness_api.schemas.envelope import Envelope
from wellness_api.schemas.user import (
    AuthPayload, PasswordUpdate, UserLogin, UserPublic, UserRead, UserRegister, UserUpdateDetails,
)
from wellness_api.deps.auth import get_current_user
from wellness_api.services.credentials import CredentialService

router = APIRouter(prefix="/api/auth", tags=["auth"])

def _auth_payload(token: str, user: User) -> AuthPayload:
    return AuthPayload(token=token, user=UserPublic.model_validate(user))

@router.post("/register", response_model=Envelope[AuthPayload], response_model_exclude_none=True,
             status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    token, user = CredentialService(db).register(
        email=payload.email, password=payload.password, name=payload.name,
    )
    return Envelope(message="User registered successfully", data=_auth_payload(token, user))

@router.post("/login", response_model=Envelope[AuthPayload], response_model_exclude_none=True)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    token, user = CredentialService(db).login(email=payload.email, password=payload.password)
    return Envelope(message="Login successful", data=_auth_payload(token, user))

@router.get("/me", response_model=Envelope[UserRead], response_model_exclude_none=True)
def me(current_user: User = Depends(get_current_user)):
    return Envelope(data=UserRead.model_validate(current_user))

@router.put("/updatedetails", response_model=Envelope[UserRead], response_model_exclude_none=True)
def update_details(
    payload: UserUpdateDetails,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = CredentialService(db).update_details(current_user, name=payload.name, email=payload.email)
    return Envelope(message="User details updated successfully", data=UserRead.model_validate(user))

@router.put("/updatepassword", response_model=Envelope[dict], response_model_exclude_none=True)
def update_password(
    payload: PasswordUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    CredentialService(db).update_password(
        current_user, current_password=payload.current_password, new_password=payload.new_password,
    )
    return Envelope(message="Password updated successfully", data={})

@router.post("/logout", response_model=Envelope[dict], response_model_exclude_none=True)
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client drops its copy.
    return Envelope(message="Logged out successfully", data={})
