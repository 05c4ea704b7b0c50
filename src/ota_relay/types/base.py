"""Base model for relay settings."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictBaseModel(BaseModel):
    """
    Frozen settings model that rejects unknown keys and loose coercion.

    Fields accept either their snake_case name or a camelCase alias, so
    `read_timeout` may also be supplied as `readTimeout` by JSON-style
    callers.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="forbid",
        frozen=True,
        strict=True,
    )
