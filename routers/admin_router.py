"""
Admin Router - user and subscription management endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from access_guard import get_settings, verify_client
from backend.utils.responses import success_response
from config.settings import Settings
from database import get_db
from models.user import BanUserRequest, CreateUserRequest, UserUpdate
from services.admin_service import AdminService

admin_router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(verify_client)],
)


def get_admin_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AdminService:
    return AdminService(db, settings)


@admin_router.post("/add-user")
async def add_user(request: CreateUserRequest, service: AdminService = Depends(get_admin_service)):
    """Create a user, optionally with a default-length subscription"""
    user = await service.create_user(request)
    return success_response({"account_id": user.account_id}, message="User added successfully")


@admin_router.post("/ban-user")
async def ban_user(request: BanUserRequest, service: AdminService = Depends(get_admin_service)):
    """Ban or unban a user"""
    await service.set_ban(request.account_id, request.is_banned)
    action = "banned" if request.is_banned else "unbanned"
    return success_response({"account_id": request.account_id}, message=f"User {action} successfully")


@admin_router.get("/users")
async def list_users(service: AdminService = Depends(get_admin_service)):
    """List all users, newest first"""
    users = await service.list_users()
    return success_response({"users": users, "count": len(users)})


@admin_router.get("/users/{account_id}")
async def get_user(account_id: str, service: AdminService = Depends(get_admin_service)):
    """Get a single user by account id"""
    return success_response(await service.get_user(account_id))


@admin_router.put("/users/{account_id}")
async def update_user(
    account_id: str,
    request: UserUpdate,
    service: AdminService = Depends(get_admin_service),
):
    """Update the supplied fields of a user"""
    await service.update_user(account_id, request)
    return success_response({"account_id": account_id}, message="User updated successfully")


@admin_router.delete("/users/{account_id}")
async def delete_user(account_id: str, service: AdminService = Depends(get_admin_service)):
    """Delete a user and all of its subscriptions"""
    await service.delete_user(account_id)
    return success_response({"account_id": account_id}, message="User deleted successfully")
