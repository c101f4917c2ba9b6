import pytest
import pytest_asyncio

from sweeper.core.permissions import PermissionLevel, resolve_level
from sweeper.services.db import Database
from sweeper.services.repos import WhitelistRepo


def test_highest_of_user_and_roles_wins():
    assert resolve_level(PermissionLevel.USER, [PermissionLevel.MODERATOR]) is PermissionLevel.MODERATOR
    assert resolve_level(PermissionLevel.ADMIN, [PermissionLevel.USER]) is PermissionLevel.ADMIN
    assert resolve_level(None, [PermissionLevel.USER, PermissionLevel.MODERATOR]) is PermissionLevel.MODERATOR


def test_nobody_is_unauthorised():
    assert resolve_level(None, []) is None


def test_guild_admin_is_always_admin():
    assert resolve_level(None, [], is_guild_admin=True) is PermissionLevel.ADMIN


def test_level_parsing():
    assert PermissionLevel.parse(" Mod ") is PermissionLevel.MODERATOR
    assert PermissionLevel.parse("admin") is PermissionLevel.ADMIN
    with pytest.raises(ValueError):
        PermissionLevel.parse("owner")


@pytest_asyncio.fixture
async def whitelist(tmp_path):
    db = Database(str(tmp_path / "nested" / "whitelist.sqlite3"))
    await db.connect()
    yield WhitelistRepo(db)
    await db.close()


class TestWhitelistRepo:
    @pytest.mark.asyncio
    async def test_user_levels_upsert_and_remove(self, whitelist):
        assert await whitelist.get_user_level(1) is None

        await whitelist.set_user_level(1, PermissionLevel.USER, updated_by="admin#1")
        await whitelist.set_user_level(1, PermissionLevel.MODERATOR, updated_by="admin#1")
        assert await whitelist.get_user_level(1) is PermissionLevel.MODERATOR

        assert await whitelist.remove_user(1) is True
        assert await whitelist.remove_user(1) is False
        assert await whitelist.get_user_level(1) is None

    @pytest.mark.asyncio
    async def test_role_levels_only_for_known_roles(self, whitelist):
        await whitelist.set_role_level(10, PermissionLevel.ADMIN)
        await whitelist.set_role_level(20, PermissionLevel.USER)

        levels = await whitelist.get_role_levels([10, 30])
        assert levels == [PermissionLevel.ADMIN]
        assert await whitelist.get_role_levels([]) == []

        assert await whitelist.remove_role(20) is True

    @pytest.mark.asyncio
    async def test_list_all(self, whitelist):
        await whitelist.set_user_level(5, PermissionLevel.USER)
        await whitelist.set_user_level(6, PermissionLevel.ADMIN)
        await whitelist.set_role_level(7, PermissionLevel.MODERATOR)

        users, roles = await whitelist.list_all()

        assert users == {6: PermissionLevel.ADMIN, 5: PermissionLevel.USER}
        assert list(users) == [6, 5]
        assert roles == {7: PermissionLevel.MODERATOR}

    @pytest.mark.asyncio
    async def test_closed_database_is_an_error(self, tmp_path):
        repo = WhitelistRepo(Database(str(tmp_path / "x.sqlite3")))

        with pytest.raises(RuntimeError):
            await repo.get_user_level(1)
