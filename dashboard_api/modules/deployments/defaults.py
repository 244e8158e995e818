"""
Default settings for a freshly created deployment.

The enabled auth methods decide which identifiers are collected and which
first factor is offered; the frontend host decides the hosted page URLs.
"""

from typing import Any, Dict, List

from .models import FirstFactor, SecondFactorPolicy, SignUpMode


def build_auth_settings(auth_methods: List[str]) -> Dict[str, Any]:
    email_enabled = "email" in auth_methods
    phone_enabled = "phone" in auth_methods
    username_enabled = "username" in auth_methods

    first_factor = FirstFactor.email_password
    alternate_first_factors: List[FirstFactor] = []

    if email_enabled:
        if phone_enabled:
            alternate_first_factors.append(FirstFactor.phone_otp)
        if username_enabled:
            alternate_first_factors.append(FirstFactor.username_password)
    elif phone_enabled:
        first_factor = FirstFactor.phone_otp
        if username_enabled:
            alternate_first_factors.append(FirstFactor.username_password)
    elif username_enabled:
        first_factor = FirstFactor.username_password

    return {
        "email_address": {"enabled": email_enabled, "required": email_enabled},
        "phone_number": {"enabled": phone_enabled, "required": phone_enabled},
        "username": {"enabled": username_enabled, "required": username_enabled},
        "password": {"enabled": True, "min_length": 8},
        "first_factor": first_factor,
        "alternate_first_factors": [factor.value for factor in alternate_first_factors],
        "second_factor_policy": SecondFactorPolicy.none,
        "multi_session_support": False,
        "session_token_lifetime": 60,
        "session_validity_period": 7 * 24 * 3600,
        "session_inactive_timeout": 24 * 3600,
    }


def build_display_settings(app_name: str, frontend_url: str, logo_url: str = "") -> Dict[str, Any]:
    return {
        "app_name": app_name,
        "sign_in_page_url": f"{frontend_url}/sign-in",
        "sign_up_page_url": f"{frontend_url}/sign-up",
        "after_sign_out_one_page_url": f"{frontend_url}/account-picker",
        "after_sign_out_all_page_url": f"{frontend_url}/sign-in",
        "user_profile_url": f"{frontend_url}/me",
        "logo_image_url": logo_url or None,
    }


def build_restrictions() -> Dict[str, Any]:
    return {
        "allowlist_enabled": False,
        "blocklist_enabled": False,
        "block_subaddresses": False,
        "block_disposable_emails": False,
        "block_voip_numbers": False,
        "country_restrictions": {"enabled": False, "country_codes": []},
        "banned_keywords": [],
        "allowlisted_resources": [],
        "blocklisted_resources": [],
        "sign_up_mode": SignUpMode.public,
    }
