from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for persisted models: snake_case attributes, camelCase JSON keys."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
