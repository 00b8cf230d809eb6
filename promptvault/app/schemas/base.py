from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema base that speaks camelCase on the wire and accepts snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
