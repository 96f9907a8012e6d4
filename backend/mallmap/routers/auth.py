from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..db import get_db
from ..schemas import LoginRequest, Principal, RegisterRequest, UserOut, ok
from ..security import get_current_principal, get_optional_principal
from ..services import get_user, login, register

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register")
def register_user(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    principal: Optional[Principal] = Depends(get_optional_principal),
):
    return ok(register(db, settings, payload, principal), "Registration successful")


@router.post("/login")
def login_user(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return ok(login(db, settings, payload), "Login successful")


@router.get("/me")
def current_user(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    user = get_user(db, principal.user_id)
    return ok({"user": UserOut.model_validate(user)})
