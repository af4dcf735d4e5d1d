# schemas/common.py

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Money is computed with Decimal, but charts consume plain JSON numbers
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]

# Non-money decimals (hours) serialize the same way
Quantity = Money


class CamelModel(BaseModel):
    """Response schemas are camelCase on the wire (spendingBreakdown, needsWantsAnalysis, ...)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
