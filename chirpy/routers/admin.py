from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from chirpy.services.session_service import get_hits

router = APIRouter(tags=["admin"])


@router.get("/admin/metrics", response_class=HTMLResponse)
def metrics(request: Request):
    hits = get_hits(request).value
    return f"""<html>
<body>
<h1>Welcome, Chirpy Admin</h1>
<p>Chirpy has been visited {hits} times!</p>
</body>
</html>
"""


@router.api_route("/api/reset", methods=["GET", "POST"], response_class=PlainTextResponse)
def reset(request: Request):
    get_hits(request).reset()
    return "Fileserver hits counter reset to 0"
