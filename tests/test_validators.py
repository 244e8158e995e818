"""Input rules and helpers that do not need the database."""

import base64

import bcrypt
import pytest

from dashboard_api.core.exceptions import BadRequestError
from dashboard_api.core.utils import build_publishable_key, generate_random_name
from dashboard_api.modules.deployments.defaults import build_auth_settings
from dashboard_api.modules.deployments.models import FirstFactor
from dashboard_api.modules.projects.validators import validate_domain_format
from dashboard_api.modules.users.security import get_password_hash


@pytest.mark.parametrize("domain", ["example.com", "a.b.example.co.uk", "my-app.io", "x1.y2"])
def test_valid_domains(domain):
    validate_domain_format(domain)


@pytest.mark.parametrize(
    "domain",
    ["", "a" * 254, "example", "example.com?x=1", "a..com", f"{'a' * 64}.com", "bad-.com"],
)
def test_invalid_domains(domain):
    with pytest.raises(BadRequestError):
        validate_domain_format(domain)


def test_publishable_key_embeds_backend_url():
    key = build_publishable_key("api.example.com", live=True)

    assert key.startswith("pk_live_")
    assert base64.b64decode(key[len("pk_live_"):]) == b"https://api.example.com"


def test_random_name_shape():
    adjective, noun = generate_random_name().split("-")

    assert adjective.isalpha() and noun.isalpha()


def test_email_is_preferred_first_factor():
    settings = build_auth_settings(["username", "email", "google_oauth"])

    assert settings["first_factor"] == FirstFactor.email_password
    assert settings["alternate_first_factors"] == ["username_password"]


def test_oauth_only_keeps_email_password_default():
    settings = build_auth_settings(["github_oauth"])

    assert settings["first_factor"] == FirstFactor.email_password
    assert settings["email_address"]["enabled"] is False


def test_password_hashing():
    hashed = get_password_hash("correct horse")

    assert hashed != "correct horse"
    assert bcrypt.checkpw(b"correct horse", hashed.encode("utf-8"))
    assert not bcrypt.checkpw(b"wrong horse", hashed.encode("utf-8"))
