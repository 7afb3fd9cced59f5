# schemas/base.py

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Decimal strings with at most two fractional digits
Money = Annotated[Decimal, Field(max_digits=10, decimal_places=2)]
NonNegativeMoney = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class APIModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
