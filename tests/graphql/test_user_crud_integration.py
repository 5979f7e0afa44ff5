"""
Integration tests for user queries and mutations against a real database
"""

import pytest

USER_FIELDS = "id name email"

CREATE_USER = f"""
mutation CreateUser($name: String!, $email: String!) {{
  createUser(name: $name, email: $email) {{
    user {{ {USER_FIELDS} }}
    errors
  }}
}}
"""

UPDATE_USER = f"""
mutation UpdateUser($id: ID!, $name: String, $email: String) {{
  updateUser(id: $id, name: $name, email: $email) {{
    user {{ {USER_FIELDS} }}
    errors
  }}
}}
"""

DELETE_USER = f"""
mutation DeleteUser($id: ID!) {{
  deleteUser(id: $id) {{
    user {{ {USER_FIELDS} }}
    errors
  }}
}}
"""

GET_USER = f"""
query GetUser($id: ID!) {{
  user(id: $id) {{ {USER_FIELDS} }}
}}
"""

LIST_USERS = f"""
query ListUsers {{
  users {{ {USER_FIELDS} }}
}}
"""


async def create(execute, name: str, email: str) -> dict:
    result = await execute(CREATE_USER, name=name, email=email)
    assert result.errors is None
    return result.data["createUser"]


pytestmark = [pytest.mark.integration, pytest.mark.requires_db]


class TestUsersQuery:
    @pytest.mark.asyncio
    async def test_empty_database_returns_empty_list(self, execute):
        result = await execute(LIST_USERS)

        assert result.errors is None
        assert result.data == {"users": []}

    @pytest.mark.asyncio
    async def test_lists_every_user(self, execute):
        await create(execute, "Ann", "ann@x.com")
        await create(execute, "Bo", "bo@x.com")

        result = await execute(LIST_USERS)

        assert result.data["users"] == [
            {"id": "1", "name": "Ann", "email": "ann@x.com"},
            {"id": "2", "name": "Bo", "email": "bo@x.com"},
        ]


class TestUserQuery:
    @pytest.mark.asyncio
    async def test_returns_created_user(self, execute):
        created = await create(execute, "Ann", "ann@x.com")

        result = await execute(GET_USER, id=created["user"]["id"])

        assert result.errors is None
        assert result.data["user"] == created["user"]

    @pytest.mark.asyncio
    async def test_unknown_id_is_a_request_level_error(self, execute):
        result = await execute(GET_USER, id="99")

        assert result.data is None
        assert len(result.errors) == 1
        assert result.errors[0].message == "Couldn't find User with 'id'=99"
        assert result.errors[0].path == ["user"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", ["99999999999999999999", "1_0"])
    async def test_malformed_id_is_not_found(self, execute, user_id):
        for n in range(10):
            await create(execute, f"User {n}", f"u{n}@x.com")

        result = await execute(GET_USER, id=user_id)

        assert result.data is None
        assert result.errors[0].message == f"Couldn't find User with 'id'={user_id}"

    @pytest.mark.asyncio
    async def test_timestamps_are_exposed(self, execute):
        created = await create(execute, "Ann", "ann@x.com")

        result = await execute(
            "query ($id: ID!) { user(id: $id) { createdAt updatedAt } }",
            id=created["user"]["id"],
        )

        assert result.errors is None
        assert result.data["user"]["createdAt"]
        assert result.data["user"]["updatedAt"]


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_valid_input_assigns_id(self, execute):
        payload = await create(execute, "Ann", "ann@x.com")

        assert payload == {
            "user": {"id": "1", "name": "Ann", "email": "ann@x.com"},
            "errors": [],
        }

    @pytest.mark.asyncio
    async def test_blank_name_returns_errors_and_persists_nothing(self, execute):
        await create(execute, "Ann", "ann@x.com")

        payload = await create(execute, "", "bo@x.com")

        assert payload["user"] is None
        assert payload["errors"] == ["Name can't be blank"]

        listed = await execute(LIST_USERS)
        assert len(listed.data["users"]) == 1

    @pytest.mark.asyncio
    async def test_every_blank_field_is_reported(self, execute):
        payload = await create(execute, " ", "")

        assert payload == {
            "user": None,
            "errors": ["Name can't be blank", "Email can't be blank"],
        }

    @pytest.mark.asyncio
    async def test_missing_required_argument_fails_validation(self, execute):
        result = await execute('mutation { createUser(name: "Ann") { errors } }')

        assert result.data is None
        assert result.errors


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_omitted_email_is_kept(self, execute):
        created = await create(execute, "Ann", "ann@x.com")

        result = await execute(UPDATE_USER, id=created["user"]["id"], name="X")

        assert result.errors is None
        assert result.data["updateUser"] == {
            "user": {"id": "1", "name": "X", "email": "ann@x.com"},
            "errors": [],
        }

    @pytest.mark.asyncio
    async def test_omitted_name_is_kept(self, execute):
        created = await create(execute, "Ann", "ann@x.com")

        result = await execute(UPDATE_USER, id=created["user"]["id"], email="Y")

        assert result.data["updateUser"]["user"] == {"id": "1", "name": "Ann", "email": "Y"}

    @pytest.mark.asyncio
    async def test_explicit_null_is_treated_as_omitted(self, execute):
        created = await create(execute, "Ann", "ann@x.com")

        result = await execute(
            'mutation ($id: ID!) { updateUser(id: $id, name: null, email: "z@x.com") '
            "{ user { name email } errors } }",
            id=created["user"]["id"],
        )

        assert result.data["updateUser"] == {
            "user": {"name": "Ann", "email": "z@x.com"},
            "errors": [],
        }

    @pytest.mark.asyncio
    async def test_blank_value_returns_user_with_rejected_values(self, execute):
        created = await create(execute, "Ann", "ann@x.com")
        user_id = created["user"]["id"]

        result = await execute(UPDATE_USER, id=user_id, name="")

        assert result.errors is None
        assert result.data["updateUser"] == {
            "user": {"id": user_id, "name": "", "email": "ann@x.com"},
            "errors": ["Name can't be blank"],
        }

        stored = await execute(GET_USER, id=user_id)
        assert stored.data["user"]["name"] == "Ann"

    @pytest.mark.asyncio
    async def test_unknown_id_is_a_request_level_error(self, execute):
        result = await execute(UPDATE_USER, id="99", name="X")

        assert result.data is None
        assert result.errors[0].message == "Couldn't find User with 'id'=99"


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_removes_user(self, execute):
        created = await create(execute, "Ann", "ann@x.com")
        await create(execute, "Bo", "bo@x.com")
        user_id = created["user"]["id"]

        result = await execute(DELETE_USER, id=user_id)

        assert result.errors is None
        assert result.data["deleteUser"] == {"user": created["user"], "errors": []}

        missing = await execute(GET_USER, id=user_id)
        assert missing.data is None
        assert missing.errors

        listed = await execute(LIST_USERS)
        assert [u["name"] for u in listed.data["users"]] == ["Bo"]

    @pytest.mark.asyncio
    async def test_unknown_id_is_a_request_level_error(self, execute):
        result = await execute(DELETE_USER, id="1")

        assert result.data is None
        assert result.errors[0].message == "Couldn't find User with 'id'=1"


@pytest.mark.asyncio
async def test_create_update_delete_lifecycle(execute):
    """Walk one user through its whole lifecycle."""
    created = await create(execute, "Ann", "ann@x.com")
    assert created == {
        "user": {"id": "1", "name": "Ann", "email": "ann@x.com"},
        "errors": [],
    }

    updated = await execute(UPDATE_USER, id="1", name="Anna")
    assert updated.data["updateUser"] == {
        "user": {"id": "1", "name": "Anna", "email": "ann@x.com"},
        "errors": [],
    }

    deleted = await execute(DELETE_USER, id="1")
    assert deleted.data["deleteUser"] == {
        "user": {"id": "1", "name": "Anna", "email": "ann@x.com"},
        "errors": [],
    }

    gone = await execute(GET_USER, id="1")
    assert gone.data is None
    assert gone.errors[0].message == "Couldn't find User with 'id'=1"
