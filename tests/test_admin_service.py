"""
Tests for administrative user management
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select

from database_models import Subscription, User, utcnow
from models.user import CreateUserRequest, UserUpdate
from services.admin_service import AdminService, DEMO_ACCOUNT
from services.errors import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def admin(test_db, test_settings):
    return AdminService(test_db, test_settings)


async def _count(test_db, model):
    result = await test_db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_create_then_get_round_trip(admin):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann"))

    user = await admin.get_user("42")

    assert user.account_id == "42"
    assert user.username == "Ann"
    assert user.hwid is None
    assert user.role == "user"
    assert user.is_banned is False
    assert user.subscriptions == []


@pytest.mark.asyncio
async def test_create_with_subscription_uses_default_window(admin, test_db, test_settings):
    before = utcnow()
    await admin.create_user(
        CreateUserRequest(account_id="42", username="Ann", hwid="HW1", role="admin", subscription_type="Pro")
    )

    user = await admin.get_user("42")
    assert user.hwid == "HW1"
    assert user.role == "admin"
    assert user.subscriptions == ["Pro"]

    subscription = (await test_db.execute(select(Subscription))).scalar_one()
    window = subscription.expires_at - before
    assert timedelta(days=test_settings.default_subscription_days) <= window < timedelta(
        days=test_settings.default_subscription_days, minutes=1
    )


@pytest.mark.asyncio
async def test_duplicate_create_conflicts_without_modification(admin, test_db):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann", hwid="HW1"))

    with pytest.raises(ConflictError):
        await admin.create_user(
            CreateUserRequest(account_id="42", username="Impostor", hwid="HW2", subscription_type="Pro")
        )

    user = await admin.get_user("42")
    assert user.username == "Ann"
    assert user.hwid == "HW1"
    assert await _count(test_db, User) == 1
    assert await _count(test_db, Subscription) == 0


@pytest.mark.asyncio
async def test_set_ban_unknown_account(admin):
    with pytest.raises(NotFoundError):
        await admin.set_ban("404", True)


@pytest.mark.asyncio
async def test_set_ban_refreshes_updated_at(admin, test_db):
    user = await admin.create_user(CreateUserRequest(account_id="42", username="Ann"))
    user.updated_at = datetime(2020, 1, 1)
    await test_db.commit()

    await admin.set_ban("42", True)

    detail = await admin.get_user("42")
    assert detail.is_banned is True
    assert detail.updated_at > datetime(2020, 1, 1)


@pytest.mark.asyncio
async def test_list_users_newest_first_with_unexpired_subscriptions(admin, test_db):
    old = await admin.create_user(CreateUserRequest(account_id="1", username="Old", subscription_type="Pro"))
    old.created_at = utcnow() - timedelta(days=1)
    test_db.add(Subscription(user_id=old.id, subscription_type="Gone", expired=True))
    await test_db.commit()
    await admin.create_user(CreateUserRequest(account_id="2", username="New"))

    users = await admin.list_users()

    assert [user.account_id for user in users] == ["2", "1"]
    assert users[0].subscriptions == []
    assert [sub.type for sub in users[1].subscriptions] == ["Pro"]
    assert users[1].subscriptions[0].expires_at is not None


@pytest.mark.asyncio
async def test_list_users_empty(admin):
    assert await admin.list_users() == []


@pytest.mark.asyncio
async def test_get_user_unknown_account(admin):
    with pytest.raises(NotFoundError):
        await admin.get_user("404")


@pytest.mark.asyncio
async def test_update_applies_only_supplied_fields(admin):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann", hwid="HW1", role="vip"))

    await admin.update_user("42", UserUpdate(username="Annie"))

    user = await admin.get_user("42")
    assert user.username == "Annie"
    assert user.hwid == "HW1"
    assert user.role == "vip"


@pytest.mark.asyncio
async def test_update_can_clear_hwid(admin):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann", hwid="HW1"))

    await admin.update_user("42", UserUpdate(hwid=None))

    assert (await admin.get_user("42")).hwid is None


@pytest.mark.asyncio
async def test_update_without_fields_is_rejected(admin):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann"))

    with pytest.raises(ValidationError) as exc_info:
        await admin.update_user("42", UserUpdate())
    assert exc_info.value.message == "No fields to update"


@pytest.mark.asyncio
async def test_update_with_only_subscription_is_rejected(admin, test_db):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann"))

    with pytest.raises(ValidationError, match="No fields to update"):
        await admin.update_user("42", UserUpdate(subscription_type="Pro", subscription_expires_days=90))

    assert await _count(test_db, Subscription) == 0


@pytest.mark.asyncio
async def test_update_rejects_null_username(admin):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann"))

    with pytest.raises(ValidationError):
        await admin.update_user("42", UserUpdate(username=None))


@pytest.mark.asyncio
async def test_update_unknown_account(admin):
    with pytest.raises(NotFoundError):
        await admin.update_user("404", UserUpdate(role="admin"))


@pytest.mark.asyncio
async def test_update_replaces_subscription_window(admin, test_db):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann", subscription_type="Pro"))

    before = utcnow()
    await admin.update_user("42", UserUpdate(role="vip", subscription_type="Pro", subscription_expires_days=90))

    rows = (await test_db.execute(select(Subscription))).scalars().all()
    assert len(rows) == 1
    assert rows[0].subscription_type == "Pro"
    assert rows[0].expires_at - before >= timedelta(days=90)


@pytest.mark.asyncio
async def test_update_adds_new_subscription_type_with_default_window(admin, test_db, test_settings):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann", subscription_type="Pro"))

    await admin.update_user("42", UserUpdate(role="vip", subscription_type="Lite"))

    user = await admin.get_user("42")
    assert user.role == "vip"
    assert sorted(user.subscriptions) == ["Lite", "Pro"]

    lite = (
        await test_db.execute(select(Subscription).where(Subscription.subscription_type == "Lite"))
    ).scalar_one()
    assert lite.expires_at - lite.created_at == timedelta(days=test_settings.default_subscription_days)


@pytest.mark.asyncio
async def test_update_with_zero_days_uses_default_window(admin, test_db, test_settings):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann"))

    await admin.update_user("42", UserUpdate(role="vip", subscription_type="Pro", subscription_expires_days=0))

    pro = (await test_db.execute(select(Subscription))).scalar_one()
    assert pro.expires_at - pro.created_at == timedelta(days=test_settings.default_subscription_days)


@pytest.mark.asyncio
async def test_delete_removes_user_and_subscriptions(admin, test_db):
    await admin.create_user(CreateUserRequest(account_id="42", username="Ann", subscription_type="Pro"))
    await admin.create_user(CreateUserRequest(account_id="43", username="Bob", subscription_type="Pro"))

    await admin.delete_user("42")

    with pytest.raises(NotFoundError):
        await admin.get_user("42")
    assert await _count(test_db, User) == 1
    assert await _count(test_db, Subscription) == 1


@pytest.mark.asyncio
async def test_delete_unknown_account(admin):
    with pytest.raises(NotFoundError):
        await admin.delete_user("404")


@pytest.mark.asyncio
async def test_seed_demo_user_is_idempotent(admin, test_db, test_settings):
    await admin.seed_demo_user()
    await admin.seed_demo_user()

    user = await admin.get_user(DEMO_ACCOUNT["account_id"])
    assert user.role == "admin"
    assert user.subscriptions == [test_settings.default_entitlement_type]
    assert await _count(test_db, User) == 1
