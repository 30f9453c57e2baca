"""Shared pydantic base model."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model with snake_case attributes and camelCase wire aliases.

    The local store reads and writes field names; the remote document store
    exchanges camelCase JSON (``model_dump(by_alias=True)``). Both spellings
    are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
