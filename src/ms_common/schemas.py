"""Base class for inbound payload schemas.

Browser clients send camelCase keys (``teamId``, ``fromTeamId``); REST and
Python callers send snake_case. Every request schema accepts both.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class InboundModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
