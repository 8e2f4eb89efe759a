"""
API routes for the Ascent Finance API.

This package contains all API endpoint definitions organized by feature.
"""

from src.api.routes import auth, entities, health, integrations, invitations, root, workspaces

__all__ = ["auth", "entities", "health", "integrations", "invitations", "root", "workspaces"]
