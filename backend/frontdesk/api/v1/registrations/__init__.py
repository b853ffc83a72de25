"""Registrations API package."""

from frontdesk.api.v1.registrations.routes import router

__all__ = ["router"]
