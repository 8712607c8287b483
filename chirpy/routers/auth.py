from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from chirpy.routers.users import user_payload
from chirpy.services.auth_service import InvalidCredentialsError, TokenInvalidError
from chirpy.services.session_service import bearer_token, get_auth_service

router = APIRouter(prefix="/api", tags=["auth"])


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""
    expires_in_seconds: Optional[int] = None


@router.post("/login")
def login(request: Request, body: LoginRequest):
    svc = get_auth_service(request)
    try:
        result = svc.login(body.email, body.password, body.expires_in_seconds)
    except InvalidCredentialsError as exc:
        raise HTTPException(401, str(exc))
    payload = user_payload(result.user)
    payload.update({"token": result.access_token, "refresh_token": result.refresh_token})
    return payload


@router.post("/refresh")
def refresh(request: Request):
    svc = get_auth_service(request)
    try:
        token = svc.refresh(bearer_token(request))
    except TokenInvalidError:
        raise HTTPException(401, "Unauthorized")
    return {"token": token}


@router.post("/revoke", status_code=204)
def revoke(request: Request):
    token = bearer_token(request)
    if not token:
        raise HTTPException(401, "Unauthorized")
    get_auth_service(request).revoke(token)
    return Response(status_code=204)
