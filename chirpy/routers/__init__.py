"""
FastAPI routers grouped by domain (users, auth, chirps, hooks, admin).

Each module exposes an APIRouter included by chirpy.app.create_app.
"""
