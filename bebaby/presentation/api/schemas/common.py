from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request body using the camelCase field names the web client sends."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")
