"""Deployments API: settings blocks, maintenance mode, social connections, image upload."""

import pytest

from dashboard_api.core.cdn import CdnService


def test_get_deployment_with_default_settings(client, deployment_id):
    response = client.get(f"/deployments/{deployment_id}")

    assert response.status_code == 200
    deployment = response.json()["data"]
    assert deployment["id"] == deployment_id

    auth = deployment["auth_settings"]
    assert auth["email_address"] == {"enabled": True, "required": True}
    assert auth["phone_number"] == {"enabled": True, "required": True}
    assert auth["username"] == {"enabled": False, "required": False}
    assert auth["first_factor"] == "email_password"
    assert auth["alternate_first_factors"] == ["phone_otp"]
    assert auth["password"] == {"enabled": True, "min_length": 8}

    display = deployment["display_settings"]
    assert display["app_name"] == "Acme"
    assert display["primary_color"] == "#6366F1"
    frontend = f"https://{deployment['frontend_host']}"
    assert display["sign_in_page_url"] == f"{frontend}/sign-in"
    assert display["user_profile_url"] == f"{frontend}/me"

    restrictions = deployment["restrictions"]
    assert restrictions["sign_up_mode"] == "public"
    assert restrictions["country_restrictions"] == {"enabled": False, "country_codes": []}


def test_first_factor_follows_enabled_methods(client):
    project = client.post(
        "/projects", json={"name": "Phones", "methods": ["phone", "username"]}
    ).json()["data"]

    auth = client.get(f"/deployments/{project['deployments'][0]['id']}").json()["data"][
        "auth_settings"
    ]

    assert auth["first_factor"] == "phone_otp"
    assert auth["alternate_first_factors"] == ["username_password"]


def test_missing_deployment_is_404(client):
    response = client.get("/deployments/12345")

    assert response.status_code == 404
    assert response.json()["detail"] == "Deployment not found"


def test_update_auth_settings_partially(client, deployment_id):
    response = client.patch(
        f"/deployments/{deployment_id}/settings/auth-settings",
        json={
            "username": {"enabled": True, "required": False},
            "password": {"enabled": True, "min_length": 12},
            "second_factor_policy": "optional",
        },
    )

    assert response.status_code == 200
    auth = response.json()["data"]
    assert auth["username"] == {"enabled": True, "required": False}
    assert auth["password"]["min_length"] == 12
    assert auth["second_factor_policy"] == "optional"
    assert auth["email_address"] == {"enabled": True, "required": True}
    assert auth["first_factor"] == "email_password"


def test_first_factor_requires_its_identifier(client, deployment_id):
    response = client.patch(
        f"/deployments/{deployment_id}/settings/auth-settings",
        json={"first_factor": "username_password"},
    )

    assert response.status_code == 400

    auth = client.get(f"/deployments/{deployment_id}").json()["data"]["auth_settings"]
    assert auth["first_factor"] == "email_password"


def test_auth_settings_reject_out_of_range_password_length(client, deployment_id):
    response = client.patch(
        f"/deployments/{deployment_id}/settings/auth-settings",
        json={"password": {"enabled": True, "min_length": 2}},
    )

    assert response.status_code == 422


def test_update_display_settings(client, deployment_id):
    response = client.patch(
        f"/deployments/{deployment_id}/settings/display-settings",
        json={"app_name": "Acme Cloud", "primary_color": "#112233", "tos_page_url": "https://acme.test/tos"},
    )

    assert response.status_code == 200
    display = response.json()["data"]
    assert display["app_name"] == "Acme Cloud"
    assert display["primary_color"] == "#112233"
    assert display["tos_page_url"] == "https://acme.test/tos"
    assert display["sign_in_page_url"].endswith("/sign-in")


def test_display_settings_reject_bad_color(client, deployment_id):
    response = client.patch(
        f"/deployments/{deployment_id}/settings/display-settings",
        json={"primary_color": "blue"},
    )

    assert response.status_code == 422


def test_update_restrictions(client, deployment_id):
    response = client.patch(
        f"/deployments/{deployment_id}/restrictions",
        json={
            "block_subaddresses": True,
            "country_restrictions": {"enabled": True, "country_codes": ["us", "DE"]},
            "sign_up_mode": "waitlist",
        },
    )

    assert response.status_code == 200
    restrictions = response.json()["data"]
    assert restrictions["block_subaddresses"] is True
    assert restrictions["country_restrictions"] == {"enabled": True, "country_codes": ["US", "DE"]}
    assert restrictions["sign_up_mode"] == "waitlist"
    assert restrictions["allowlist_enabled"] is False


def test_maintenance_mode_toggle(client, deployment_id):
    url = f"/deployments/{deployment_id}/maintenance-mode"

    response = client.patch(url, json={"enabled": True})
    assert response.status_code == 200
    assert response.json()["data"]["maintenance_mode"] is True

    response = client.patch(url, json={"enabled": False})
    assert response.json()["data"]["maintenance_mode"] is False


def test_settings_of_missing_deployment_are_404(client):
    response = client.patch("/deployments/777/maintenance-mode", json={"enabled": True})

    assert response.status_code == 404


def oauth_only_deployment(client, methods=("github_oauth",)):
    project = client.post(
        "/projects", json={"name": "Social", "methods": list(methods)}
    ).json()["data"]
    return project["deployments"][0]["id"]


def test_oauth_only_deployment_accepts_unrelated_auth_update(client):
    deployment_id = oauth_only_deployment(client)

    response = client.patch(
        f"/deployments/{deployment_id}/settings/auth-settings",
        json={"session_token_lifetime": 120},
    )

    assert response.status_code == 200
    auth = response.json()["data"]
    assert auth["session_token_lifetime"] == 120
    assert auth["first_factor"] == "email_password"
    assert auth["email_address"]["enabled"] is False


def test_disabling_first_factor_identifier_is_rejected(client, deployment_id):
    response = client.patch(
        f"/deployments/{deployment_id}/settings/auth-settings",
        json={"email_address": {"enabled": False, "required": False}},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == (
        "First factor email_password requires email_address to be enabled"
    )


def test_oauth_methods_create_social_connections(client):
    deployment_id = oauth_only_deployment(client, ("email", "google_oauth", "github_oauth"))

    response = client.get(f"/deployments/{deployment_id}/social-connections")

    assert response.status_code == 200
    body = response.json()["data"]
    assert body["has_more"] is False
    assert [c["provider"] for c in body["data"]] == ["google_oauth", "github_oauth"]
    assert all(c["enabled"] for c in body["data"])
    assert body["data"][0]["credentials"] == {
        "client_id": "",
        "redirect_uri": "",
        "scopes": [],
        "has_client_secret": False,
    }


def test_project_without_oauth_has_no_social_connections(client, deployment_id):
    body = client.get(f"/deployments/{deployment_id}/social-connections").json()["data"]

    assert body["data"] == []


def test_upsert_social_connection(client, deployment_id):
    url = f"/deployments/{deployment_id}/social-connections"

    created = client.put(
        url,
        json={
            "provider": "discord_oauth",
            "credentials": {"client_id": "abc", "client_secret": "s3cret"},
        },
    )
    assert created.status_code == 200
    connection = created.json()["data"]
    assert connection["provider"] == "discord_oauth"
    assert connection["enabled"] is True
    assert connection["credentials"]["client_id"] == "abc"
    assert connection["credentials"]["has_client_secret"] is True
    assert "client_secret" not in connection["credentials"]

    updated = client.put(
        url,
        json={
            "provider": "discord_oauth",
            "enabled": False,
            "user_defined_scopes": ["identify"],
            "credentials": {"redirect_uri": "https://acme.test/cb"},
        },
    ).json()["data"]
    assert updated["id"] == connection["id"]
    assert updated["enabled"] is False
    assert updated["user_defined_scopes"] == ["identify"]
    assert updated["credentials"]["client_id"] == "abc"
    assert updated["credentials"]["redirect_uri"] == "https://acme.test/cb"

    listed = client.get(url).json()["data"]["data"]
    assert [c["provider"] for c in listed] == ["discord_oauth"]


def test_upsert_social_connection_rejects_unknown_provider(client, deployment_id):
    response = client.put(
        f"/deployments/{deployment_id}/social-connections", json={"provider": "myspace_oauth"}
    )

    assert response.status_code == 422


def test_social_connections_of_missing_deployment_are_404(client):
    assert client.get("/deployments/404/social-connections").status_code == 404


@pytest.fixture
def cdn_uploads(monkeypatch):
    uploads = []

    async def fake_upload(cls, content, key, content_type="image/png"):
        uploads.append((content, key, content_type))
        return f"https://cdn.test/{key}"

    monkeypatch.setattr(CdnService, "is_configured", classmethod(lambda cls: True))
    monkeypatch.setattr(CdnService, "upload_file", classmethod(fake_upload))
    return uploads


@pytest.mark.parametrize(
    "image_type, content_type, key_suffix, setting",
    [
        ("logo", "image/png", "logo.png", "logo_image_url"),
        ("favicon", "image/x-icon", "favicon.ico", "favicon_image_url"),
        ("user-profile", "image/jpeg", "user-profile.jpg", "default_user_profile_image_url"),
        ("org-profile", "image/webp", "org-profile.webp", "default_organization_profile_image_url"),
    ],
)
def test_upload_image_updates_display_settings(
    client, deployment_id, cdn_uploads, image_type, content_type, key_suffix, setting
):
    response = client.post(
        f"/deployments/{deployment_id}/upload/{image_type}",
        files={"file": ("image", b"\x89fake-bytes", content_type)},
    )

    assert response.status_code == 200
    key = f"deployments/{deployment_id}/{key_suffix}"
    assert response.json()["data"] == {"url": f"https://cdn.test/{key}"}
    assert cdn_uploads == [(b"\x89fake-bytes", key, content_type)]

    display = client.get(f"/deployments/{deployment_id}").json()["data"]["display_settings"]
    assert display[setting] == f"https://cdn.test/{key}"


@pytest.mark.parametrize(
    "image_type, content_type, body, message",
    [
        ("banner", "image/png", b"x", "Invalid image type. Allowed types: logo, favicon, user-profile, org-profile"),
        ("logo", "text/plain", b"x", "Invalid file type. Only images are allowed."),
        ("logo", "image/tiff", b"x", "Unsupported image format. Supported formats: JPEG, PNG, GIF, WEBP, ICO"),
        ("logo", "image/png", b"", "No image data provided"),
    ],
)
def test_upload_image_rejects_bad_files(
    client, deployment_id, cdn_uploads, image_type, content_type, body, message
):
    response = client.post(
        f"/deployments/{deployment_id}/upload/{image_type}",
        files={"file": ("image", body, content_type)},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == message
    assert cdn_uploads == []


def test_upload_without_cdn_is_502(client, deployment_id):
    response = client.post(
        f"/deployments/{deployment_id}/upload/logo",
        files={"file": ("logo.png", b"png", "image/png")},
    )

    assert response.status_code == 502
