from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Snake_case in Python, camelCase on the wire for the Teams client."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)
