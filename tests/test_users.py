"""Deployment users API: listing, creation, details, update, deletion."""

import pytest


def users_url(deployment_id):
    return f"/deployments/{deployment_id}/users"


def test_create_user(client, deployment_id, create_user):
    user = create_user(email_address="  Ada@Example.com ", username="ada", password="s3cret-pass")

    assert user["email_address"] == "ada@example.com"
    assert user["username"] == "ada"
    assert user["disabled"] is False
    assert "password" not in user
    assert "password_hash" not in user

    details = client.get(f"{users_url(deployment_id)}/{user['id']}/details").json()["data"]
    assert details["has_password"] is True
    assert details["deployment_id"] == deployment_id
    assert details["public_metadata"] == {}


def test_duplicate_email_conflicts(client, deployment_id, create_user):
    create_user()

    response = client.post(
        users_url(deployment_id),
        json={
            "first_name": "Other",
            "email_address": "ADA@example.com",
            "phone_number": "+15550101",
        },
    )

    assert response.status_code == 409


def test_password_shorter_than_deployment_minimum(client, deployment_id):
    response = client.post(
        users_url(deployment_id),
        json={
            "first_name": "Ada",
            "email_address": "ada@example.com",
            "phone_number": "+15550100",
            "password": "short1",
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Password must be at least 8 characters"


def test_subaddresses_blocked_by_restrictions(client, deployment_id):
    client.patch(
        f"/deployments/{deployment_id}/restrictions", json={"block_subaddresses": True}
    )

    response = client.post(
        users_url(deployment_id),
        json={
            "first_name": "Ada",
            "email_address": "ada+test@example.com",
            "phone_number": "+15550100",
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Email subaddresses are not allowed"


@pytest.mark.parametrize(
    "payload",
    [
        {"first_name": "Ada", "email_address": "not-an-email"},
        {"first_name": "", "email_address": "ada@example.com"},
        {"first_name": "Ada", "email_address": "ada@example.com", "username": "a b"},
        {"first_name": "Ada", "email_address": "ada@example.com", "phone_number": "call me"},
    ],
)
def test_create_user_schema_errors(client, deployment_id, payload):
    assert client.post(users_url(deployment_id), json=payload).status_code == 422


def test_list_users_paginates(client, deployment_id, create_user):
    for i in range(3):
        create_user(email_address=f"user{i}@example.com", username=f"user{i}")

    first = client.get(
        users_url(deployment_id), params={"limit": 2, "sort_key": "username", "sort_order": "asc"}
    ).json()["data"]
    second = client.get(
        users_url(deployment_id),
        params={"limit": 2, "offset": 2, "sort_key": "username", "sort_order": "asc"},
    ).json()["data"]

    assert [u["username"] for u in first["data"]] == ["user0", "user1"]
    assert first["has_more"] is True
    assert [u["username"] for u in second["data"]] == ["user2"]
    assert second["has_more"] is False


def test_list_users_search_and_disabled_filter(client, deployment_id, create_user):
    grace = create_user(first_name="Grace", last_name="Hopper", email_address="grace@navy.mil")
    create_user(first_name="Alan", last_name="Turing", email_address="alan@example.com")
    client.patch(f"{users_url(deployment_id)}/{grace['id']}", json={"disabled": True})

    found = client.get(users_url(deployment_id), params={"search": "hopp"}).json()["data"]["data"]
    assert [u["id"] for u in found] == [grace["id"]]

    disabled = client.get(users_url(deployment_id), params={"disabled": "true"}).json()["data"]["data"]
    assert [u["first_name"] for u in disabled] == ["Grace"]

    enabled = client.get(users_url(deployment_id), params={"disabled": "false"}).json()["data"]["data"]
    assert [u["first_name"] for u in enabled] == ["Alan"]


@pytest.mark.parametrize(
    "params",
    [{"limit": 0}, {"limit": 101}, {"offset": -1}, {"sort_key": "password"}, {"sort_order": "up"}],
)
def test_list_users_rejects_bad_query(client, deployment_id, params):
    assert client.get(users_url(deployment_id), params=params).status_code == 422


def test_list_users_of_missing_deployment(client):
    assert client.get(users_url(4242)).status_code == 404


def test_update_user(client, deployment_id, create_user):
    user = create_user(username="ada")

    response = client.patch(
        f"{users_url(deployment_id)}/{user['id']}",
        json={"last_name": "King", "public_metadata": {"plan": "pro"}},
    )

    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["last_name"] == "King"
    assert updated["first_name"] == "Ada"
    assert updated["username"] == "ada"
    assert updated["public_metadata"] == {"plan": "pro"}


def test_update_username_conflict(client, deployment_id, create_user):
    create_user(username="taken")
    other = create_user(email_address="other@example.com", username="other")

    response = client.patch(
        f"{users_url(deployment_id)}/{other['id']}", json={"username": "taken"}
    )

    assert response.status_code == 409


def test_delete_user(client, deployment_id, create_user):
    user = create_user()
    url = f"{users_url(deployment_id)}/{user['id']}"

    response = client.delete(url)

    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}
    assert client.get(f"{url}/details").status_code == 404
    assert client.get(users_url(deployment_id)).json()["data"]["data"] == []

    # The email address is free again once the user is gone
    create_user()


def test_same_email_on_another_deployment(client, create_user):
    create_user()
    other = client.post("/projects", json={"name": "Other", "methods": ["email"]}).json()["data"]
    other_deployment_id = other["deployments"][0]["id"]

    response = client.post(
        users_url(other_deployment_id),
        json={"first_name": "Ada", "email_address": "ada@example.com"},
    )

    assert response.status_code == 200


def test_users_of_deleted_project_are_404(client, project, deployment_id, create_user):
    user = create_user()
    client.delete(f"/projects/{project['id']}")

    assert client.get(users_url(deployment_id)).status_code == 404
    assert client.get(f"{users_url(deployment_id)}/{user['id']}/details").status_code == 404
    response = client.post(
        users_url(deployment_id), json={"first_name": "Bo", "email_address": "bo@example.com"}
    )
    assert response.status_code == 404


@pytest.mark.parametrize(
    "settings, payload, message",
    [
        (
            {"phone_number": {"enabled": True, "required": True}},
            {"email_address": "ada@example.com"},
            "Phone number is required",
        ),
        (
            {"username": {"enabled": True, "required": True}},
            {"email_address": "ada@example.com", "phone_number": "+15550100"},
            "Username is required",
        ),
    ],
)
def test_required_identifiers(client, settings, payload, message):
    project = client.post("/projects", json={"name": "Strict", "methods": ["email"]}).json()["data"]
    deployment_id = project["deployments"][0]["id"]
    client.patch(f"/deployments/{deployment_id}/settings/auth-settings", json=settings)

    response = client.post(users_url(deployment_id), json={"first_name": "Ada", **payload})

    assert response.status_code == 400
    assert response.json()["detail"] == message


@pytest.mark.parametrize(
    "overrides",
    [
        {"email_address": "spammer@example.com"},
        {"username": "SpamKing"},
        {"last_name": "Spam"},
    ],
)
def test_banned_keywords_reject_user(client, deployment_id, overrides):
    client.patch(f"/deployments/{deployment_id}/restrictions", json={"banned_keywords": ["spam"]})
    payload = {
        "first_name": "Ada",
        "email_address": "ada@example.com",
        "phone_number": "+15550100",
        **overrides,
    }

    response = client.post(users_url(deployment_id), json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Banned keyword: spam"


def test_blocklist_rejects_email_and_domain(client, deployment_id, create_user):
    client.patch(
        f"/deployments/{deployment_id}/restrictions",
        json={
            "blocklist_enabled": True,
            "blocklisted_resources": ["evil.test", "Mallory@example.com"],
        },
    )
    url = users_url(deployment_id)
    base = {"first_name": "Ada", "phone_number": "+15550100"}

    by_domain = client.post(url, json={**base, "email_address": "eve@evil.test"})
    by_address = client.post(url, json={**base, "email_address": "mallory@example.com"})

    assert by_domain.status_code == 400
    assert by_address.status_code == 400
    assert by_domain.json()["detail"] == "Email address is blocklisted"
    create_user(email_address="ok@example.com")


def test_blocklist_is_ignored_while_disabled(client, deployment_id, create_user):
    client.patch(
        f"/deployments/{deployment_id}/restrictions",
        json={"blocklist_enabled": False, "blocklisted_resources": ["example.com"]},
    )

    create_user()


def test_allowlist_admits_only_listed_domains(client, deployment_id, create_user):
    client.patch(
        f"/deployments/{deployment_id}/restrictions",
        json={"allowlist_enabled": True, "allowlisted_resources": ["acme.test"]},
    )

    response = client.post(
        users_url(deployment_id),
        json={"first_name": "Ada", "email_address": "ada@example.com", "phone_number": "+15550100"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Email address is not on the allowlist"
    create_user(email_address="ada@acme.test")


def test_search_treats_wildcards_literally(client, deployment_id, create_user):
    create_user(email_address="ada_l@example.com", username="ada_l")
    create_user(email_address="adaxl@example.com", username="adaxl")

    underscore = client.get(users_url(deployment_id), params={"search": "a_l"}).json()["data"]
    percent = client.get(users_url(deployment_id), params={"search": "%"}).json()["data"]

    assert [u["username"] for u in underscore["data"]] == ["ada_l"]
    assert percent["data"] == []
