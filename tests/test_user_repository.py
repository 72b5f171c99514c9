import pytest

from messenger_store.data.models import DirectoryEntry, User, UserProfile
from messenger_store.utils.exceptions import ValidationError


async def test_register_creates_node_and_directory_entry(data, store):
    added = await data.users.register(User(first_name="Ada", last_name="Lovelace", email="ada@example.com"))

    assert added is True
    assert await data.users.exists("ada-example-com") is True
    assert await store.get("ada-example-com") == {"first_name": "Ada", "last_name": "Lovelace"}
    assert await data.users.list_all() == [DirectoryEntry(name="Ada Lovelace", key="ada-example-com")]


async def test_register_twice_keeps_one_directory_entry(data):
    user = User(first_name="Ada", last_name="Lovelace", email="ada@example.com")

    assert await data.users.register(user) is True
    assert await data.users.register(user) is False
    assert len(await data.users.list_all()) == 1


async def test_register_keeps_existing_conversations(data, store, registered, alice, bob):
    await store.set("a-x-com/conversations", [{"id": "conversation_m1"}])

    await data.users.register(User(first_name="Alice", last_name="Adams", email="a@x.com"))

    assert await store.get("a-x-com/conversations") == [{"id": "conversation_m1"}]


async def test_get_user_and_missing_user(data, registered):
    assert await data.users.get_user("b-y-com") == UserProfile(key="b-y-com", first_name="Bob", last_name="Brown")
    assert await data.users.get_user("nobody") is None
    assert await data.users.exists("nobody") is False


async def test_list_all_skips_malformed_entries(data, store, registered):
    directory = await store.get("users")
    directory.append({"name": 42})
    await store.set("users", directory)

    assert [entry.key for entry in await data.users.list_all()] == ["a-x-com", "b-y-com"]


async def test_search_matches_name_prefix_ignoring_case(data, registered):
    await data.users.register(User(first_name="Albert", last_name="Zed", email="al@z.com"))

    assert [entry.key for entry in await data.users.search("AL")] == ["a-x-com", "al-z-com"]
    assert [entry.key for entry in await data.users.search("al", exclude_key="a-x-com")] == ["al-z-com"]
    assert await data.users.search("   ") == []
    assert await data.users.search("zed") == []


@pytest.mark.parametrize("email", ["b@y-com/conversations", "a#b@x.com", "a$b@x.com", "a[0]@x.com"])
async def test_register_rejects_keys_that_are_not_one_path_segment(data, store, email):
    with pytest.raises(ValidationError):
        await data.users.register(User(first_name="Eve", last_name="Evil", email=email))

    assert await store.get("users") is None
