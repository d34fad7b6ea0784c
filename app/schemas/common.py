from datetime import time
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from app.services.scheduling.local_time import HHMM_PATTERN, format_hhmm


HHMM_REGEX = HHMM_PATTERN.pattern

# time rendered on the wire as "HH:mm"
HHMMTime = Annotated[time, PlainSerializer(format_hhmm, return_type=str)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; readable from ORM rows and dataclasses."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
