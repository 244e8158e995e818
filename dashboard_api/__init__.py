"""Dashboard API: console backend for projects, deployments and their users."""

__version__ = "1.0.0"
