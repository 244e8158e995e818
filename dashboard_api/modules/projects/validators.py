"""
Input rules for projects and their deployments.
Each check raises BadRequestError with a message suitable for the console UI.
"""

from typing import List

from dashboard_api.core.exceptions import BadRequestError


VALID_AUTH_METHODS = (
    "email",
    "phone",
    "username",
    "google_oauth",
    "apple_oauth",
    "facebook_oauth",
    "github_oauth",
    "microsoft_oauth",
    "discord_oauth",
    "linkedin_oauth",
    "gitlab_oauth",
    "x_oauth",
)

MAX_PROJECT_NAME_LENGTH = 100


def validate_project_name(name: str) -> None:
    name = (name or "").strip()
    if not name:
        raise BadRequestError("Project name cannot be empty")

    if len(name) > MAX_PROJECT_NAME_LENGTH:
        raise BadRequestError(
            f"Project name cannot exceed {MAX_PROJECT_NAME_LENGTH} characters"
        )


def validate_auth_methods(auth_methods: List[str]) -> None:
    if not auth_methods:
        raise BadRequestError("At least one authentication method must be specified")

    for method in auth_methods:
        if method not in VALID_AUTH_METHODS:
            raise BadRequestError(f"Invalid authentication method: {method}")


def validate_domain_format(domain: str) -> None:
    """
    Check a custom domain such as "example.com".
    Only the hostname is accepted: no scheme, path, query or fragment.
    """
    if not domain or len(domain) > 253:
        raise BadRequestError("Domain must be between 1 and 253 characters")

    if any(token in domain for token in ("://", "/", "?", "#")):
        raise BadRequestError("Domain cannot contain protocol, path, query, or fragment")

    labels = domain.split(".")
    if len(labels) < 2:
        raise BadRequestError("Domain must have at least two labels (e.g., example.com)")

    for label in labels:
        if not label or len(label) > 63:
            raise BadRequestError("Each domain label must be between 1 and 63 characters")

        if not (label[0].isalnum() and label[-1].isalnum()):
            raise BadRequestError(
                "Domain labels must start and end with alphanumeric characters"
            )

        if not all(char.isalnum() or char == "-" for char in label):
            raise BadRequestError(
                "Domain labels can only contain alphanumeric characters and hyphens"
            )
