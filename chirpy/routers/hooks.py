import logging
import secrets

from fastapi import APIRouter, HTTPException, Request, Response

from chirpy.core.security import extract_authorization
from chirpy.repositories.errors import NotFoundError
from chirpy.services.session_service import get_settings_from, get_store

router = APIRouter(prefix="/api/polka", tags=["hooks"])
logger = logging.getLogger(__name__)

UPGRADE_EVENT = "user.upgraded"


@router.post("/webhooks", status_code=204)
def polka(request: Request, payload: dict):
    expected = get_settings_from(request).polka_key
    supplied = extract_authorization(request.headers.get("authorization"), scheme="ApiKey")
    if not expected or not supplied or not secrets.compare_digest(supplied, expected):
        raise HTTPException(401, "Unauthorized")
    if payload.get("event") != UPGRADE_EVENT:
        return Response(status_code=204)
    data = payload.get("data") or {}
    user_id = data.get("user_id") if isinstance(data, dict) else None
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise HTTPException(400, "Invalid user_id")
    try:
        get_store(request).upgrade_user(user_id)
    except NotFoundError:
        raise HTTPException(404, "Not Found")
    logger.info("User %s upgraded to Chirpy Red", user_id)
    return Response(status_code=204)
