from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from chirpy.domain.entities import User
from chirpy.repositories.errors import NotFoundError
from chirpy.services.auth_service import AccountExistsError, RegistrationError
from chirpy.services.session_service import current_user_id, get_auth_service, get_store

router = APIRouter(prefix="/api", tags=["users"])


class Credentials(BaseModel):
    email: str = ""
    password: str = ""


def user_payload(user: User) -> dict:
    """Public view of a user (never includes the password hash)."""
    return {"id": user.id, "email": user.email, "is_chirpy_red": user.is_chirpy_red}


@router.post("/users", status_code=201)
def create_user(request: Request, body: Credentials):
    svc = get_auth_service(request)
    try:
        user = svc.register(body.email, body.password)
    except RegistrationError as exc:
        raise HTTPException(400, exc.message)
    except AccountExistsError as exc:
        raise HTTPException(400, str(exc))
    return user_payload(user)


@router.put("/users")
def update_user(request: Request, body: Credentials):
    user_id = current_user_id(request)
    svc = get_auth_service(request)
    try:
        user = svc.update_account(user_id, body.email, body.password)
    except RegistrationError as exc:
        raise HTTPException(400, exc.message)
    except AccountExistsError as exc:
        raise HTTPException(400, str(exc))
    except NotFoundError:
        raise HTTPException(404, "Not Found")
    return user_payload(user)


@router.get("/users")
def list_users(request: Request):
    return [user_payload(u) for u in get_store(request).get_users()]


@router.get("/users/{user_id}")
def get_user(user_id: int, request: Request):
    try:
        user = get_store(request).get_user_by_id(user_id)
    except NotFoundError:
        raise HTTPException(404, "Not Found")
    return user_payload(user)
