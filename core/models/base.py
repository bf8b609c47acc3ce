# =============================================================================
# core/models/base.py - Shared Model Configuration
# =============================================================================
# Request bodies arrive from the client in camelCase, but older callers and
# scripts send snake_case. CamelModel accepts both spellings for every field
# and dumps snake_case (the database spelling) by default:
#   create: model.model_dump(mode="json")
#   update: model.model_dump(mode="json", exclude_unset=True)
#
# Update schemas make every field optional, so NOT NULL columns are listed
# in `not_null_fields`: they may be left out of a PATCH body but an explicit
# null is a validation error (400) instead of a database constraint error.
# =============================================================================

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from lib.casing import to_camel


class CamelModel(BaseModel):
    """
    Base class for request schemas.

    Example:
        ShootCreate(title="x", instagramLinks=[])
        ShootCreate(title="x", instagram_links=[])   # same result
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    not_null_fields: ClassVar[frozenset[str]] = frozenset()

    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name in cls.not_null_fields:
            raise ValueError("may be omitted but not null")
        return value
