from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from chirpy.repositories.errors import NotFoundError
from chirpy.services.chirp_service import ChirpForbiddenError, ChirpTooLongError
from chirpy.services.session_service import current_user_id, get_chirp_service

router = APIRouter(prefix="/api", tags=["chirps"])


class ChirpRequest(BaseModel):
    body: str = ""


@router.post("/chirps", status_code=201)
def create_chirp(request: Request, payload: ChirpRequest):
    author_id = current_user_id(request)
    try:
        chirp = get_chirp_service(request).post(payload.body, author_id)
    except ChirpTooLongError as exc:
        raise HTTPException(400, str(exc))
    return chirp.to_dict()


@router.get("/chirps")
def list_chirps(
    request: Request,
    author_id: Optional[int] = None,
    contains: Optional[str] = None,
    sort: str = "asc",
):
    chirps = get_chirp_service(request).list_chirps(author_id=author_id, contains=contains, order=sort)
    return [c.to_dict() for c in chirps]


@router.get("/chirps/{chirp_id}")
def get_chirp(chirp_id: int, request: Request):
    try:
        chirp = get_chirp_service(request).get(chirp_id)
    except NotFoundError:
        raise HTTPException(404, "Not Found")
    return chirp.to_dict()


@router.delete("/chirps/{chirp_id}", status_code=204)
def delete_chirp(chirp_id: int, request: Request):
    requester = current_user_id(request)
    try:
        get_chirp_service(request).delete(chirp_id, requester)
    except NotFoundError:
        raise HTTPException(404, "Not Found")
    except ChirpForbiddenError:
        raise HTTPException(403, "Forbidden")
    return Response(status_code=204)
