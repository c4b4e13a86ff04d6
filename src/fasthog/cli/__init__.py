# CLI module for fasthog
"""fasthog CLI - Command-line interface for the fasthog scanner."""

from fasthog.cli.main import app

__all__ = ["app"]
