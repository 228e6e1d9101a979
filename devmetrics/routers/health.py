from fastapi import APIRouter, Depends, Response

from ..core.config import Settings, get_settings
from ..schemas.common import EnvStatus, Health

router = APIRouter(tags=["health"])

@router.get("/api/health", response_model=Health)
def health():
    return Health()

@router.get("/api/debug/env", summary="Which vendor credentials are configured (values masked)")
def debug_env(settings: Settings = Depends(get_settings)) -> EnvStatus:
    return settings.credential_status()

@router.head("/")
def head_root():
    return Response(status_code=200)
