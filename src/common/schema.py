"""Common schemas for the API."""

from ninja import Schema
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


class CamelSchema(Schema):
    """Schema with camelCase wire names; snake_case names are accepted on input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VersionResponse(Schema):
    version: str


class OkResponse(Schema):
    ok: bool = True
