"""
Request schemas.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from chainvalue.config.constants import UINT256_MAX


class SetValueRequest(BaseModel):
    """Body of POST /api/set."""

    model_config = ConfigDict(extra="ignore")

    value: Annotated[int, Field(strict=True, ge=0, le=UINT256_MAX)]
    wait: bool = False
