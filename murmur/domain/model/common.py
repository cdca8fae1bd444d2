"""Base model for all domain entities."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """Base class for all domain models.

    Models are immutable. On the wire fields are camelCase (``parentId``,
    ``createdAt``); both spellings are accepted on input.
    """

    model_config = ConfigDict(
        frozen=True,  # All domain models are immutable
        alias_generator=to_camel,
        populate_by_name=True,
    )
