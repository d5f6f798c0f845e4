"""Auth Router - login/logout against the store API."""
from fastapi import APIRouter, Depends, HTTPException

from storefront.auth import AuthService
from storefront.errors import AuthenticationError
from .deps import get_auth_service
from .models import LoginRequest

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    try:
        await auth.login(request.username, request.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return {"authenticated": True}


@router.post("/logout")
def logout(auth: AuthService = Depends(get_auth_service)):
    auth.logout()
    return {"authenticated": False}


@router.get("/status")
def status(auth: AuthService = Depends(get_auth_service)):
    return {"authenticated": auth.is_authenticated}
