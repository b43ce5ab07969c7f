"""
Shared schema configuration

The web and offline clients speak camelCase JSON; Python attributes stay
snake_case and accept either spelling on input.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
