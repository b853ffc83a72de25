"""Patients API package."""

from frontdesk.api.v1.patients.routes import router

__all__ = ["router"]
