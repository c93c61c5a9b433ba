"""
Client Router - endpoints called by the desktop client
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from access_guard import get_settings, verify_client
from backend.utils.responses import success_response
from config.settings import Settings
from database import get_db
from models.client import LoginRequest, SetupRequest
from services.session_service import SessionService, check_setup
from services.update_service import UpdateService

client_router = APIRouter(
    prefix="/api/client/auth",
    tags=["client"],
    dependencies=[Depends(verify_client)],
)


@client_router.post("/setup")
async def setup(request: SetupRequest, settings: Settings = Depends(get_settings)):
    """Check that the client runs the supported version"""
    check_setup(request.version, settings)
    return success_response()


@client_router.post("/login")
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Authenticate by account id and hardware id, returning profile and entitlements"""
    payload = await SessionService(db, settings).login(request.account_id, request.hwid)
    return success_response(payload)


@client_router.get("/version")
async def current_version(settings: Settings = Depends(get_settings)):
    """Current application version for the auto-updater"""
    return success_response(UpdateService(settings).current_version())


@client_router.get("/update")
async def update_metadata(settings: Settings = Depends(get_settings)):
    """Download descriptor for the current update artifact"""
    return success_response(UpdateService(settings).update_metadata())
