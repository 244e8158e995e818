"""Core utility functions for the application"""

import base64
import random
from datetime import datetime, timezone


ADJECTIVES = [
    "amber", "bold", "brave", "calm", "clever", "cosmic", "crisp", "daring",
    "eager", "fancy", "gentle", "golden", "happy", "jolly", "lively", "lucky",
    "mellow", "misty", "noble", "quiet", "rapid", "shiny", "silent", "swift",
]

NOUNS = [
    "badger", "comet", "falcon", "forest", "harbor", "island", "lantern",
    "meadow", "otter", "panda", "pebble", "river", "rocket", "summit",
    "tiger", "valley", "willow", "zephyr",
]


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the database stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_random_name() -> str:
    """
    Generate a readable random name like "swift-otter".
    Used as the hostname prefix of staging deployments.
    """
    return f"{random.choice(ADJECTIVES)}-{random.choice(NOUNS)}"


def build_publishable_key(backend_host: str, live: bool = False) -> str:
    """
    Build a deployment publishable key.

    The key is the mode prefix followed by the base64-encoded backend URL,
    so a frontend SDK can find the backend from the key alone.

    Args:
        backend_host: Backend hostname of the deployment (no scheme)
        live: True for production deployments

    Returns:
        str: e.g. "pk_test_aHR0cHM6Ly9..."
    """
    prefix = "pk_live_" if live else "pk_test_"
    encoded = base64.b64encode(f"https://{backend_host}".encode("utf-8")).decode("ascii")
    return prefix + encoded
