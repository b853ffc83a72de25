"""Schemas shared by the v1 endpoints."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """Request body base: accepts camelCase (frontend) and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class SoftDeleteRequest(RequestModel):
    """Soft-delete (true) or restore (false) a record."""

    deleted: bool
