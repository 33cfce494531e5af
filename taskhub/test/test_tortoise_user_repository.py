"""
TortoiseUserRepository の結合テスト（インメモリ SQLite）
"""
import pytest

from taskhub.domain.entity.user_entity import User
from taskhub.domain.exception.common_exceptions import StorageError
from taskhub.domain.exception.user_exceptions import UserNotFoundError
from taskhub.infra.tortoise_client.user_repository import TortoiseUserRepository


def new_user(username: str = "alice", email: str = "alice@example.com") -> User:
    return User.create(username, email, "hashed-password", "Alice", "Liddell")


@pytest.mark.usefixtures("tortoise_db")
class TestTortoiseUserRepository:
    @pytest.fixture
    def repo(self):
        return TortoiseUserRepository()

    @pytest.mark.asyncio
    async def test_create_and_get_by_id(self, repo):
        created = await repo.create(new_user())

        fetched = await repo.get_by_id(created.id)

        assert created.id > 0
        assert fetched.username == "alice"
        assert fetched.password_hash == "hashed-password"
        assert fetched.active is True

    @pytest.mark.asyncio
    async def test_lookups_by_username_and_email(self, repo):
        created = await repo.create(new_user())

        assert (await repo.get_by_username("alice")).id == created.id
        assert (await repo.get_by_email("alice@example.com")).id == created.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,arg",
        [("get_by_id", 404), ("get_by_username", "nobody"), ("get_by_email", "nobody@example.com")],
    )
    async def test_missing_user(self, repo, method, arg):
        with pytest.raises(UserNotFoundError):
            await getattr(repo, method)(arg)

    @pytest.mark.asyncio
    async def test_duplicate_username_is_storage_error(self, repo):
        await repo.create(new_user())

        with pytest.raises(StorageError) as exc_info:
            await repo.create(new_user(email="other@example.com"))
        assert exc_info.value.operation == "create"

    @pytest.mark.asyncio
    async def test_update(self, repo):
        created = await repo.create(new_user())
        created.update("Alicia", "")
        created.deactivate()

        updated = await repo.update(created)

        assert updated.first_name == "Alicia"
        assert updated.last_name == "Liddell"
        assert updated.active is False
        assert updated.updated_at > updated.created_at

    @pytest.mark.asyncio
    async def test_update_missing(self, repo):
        ghost = new_user()
        ghost.id = 77

        with pytest.raises(UserNotFoundError):
            await repo.update(ghost)

    @pytest.mark.asyncio
    async def test_delete(self, repo):
        created = await repo.create(new_user())

        await repo.delete(created.id)

        with pytest.raises(UserNotFoundError):
            await repo.get_by_id(created.id)
        with pytest.raises(UserNotFoundError):
            await repo.delete(created.id)

    @pytest.mark.asyncio
    async def test_get_all_and_active_users(self, repo):
        alice = await repo.create(new_user())
        bob = await repo.create(new_user("bob", "bob@example.com"))
        carol = await repo.create(new_user("carol", "carol@example.com"))
        bob.deactivate()
        await repo.update(bob)

        all_users = await repo.get_all()
        active = await repo.get_active_users()

        assert [u.id for u in all_users] == [alice.id, bob.id, carol.id]
        assert [u.id for u in active] == [carol.id, alice.id]
