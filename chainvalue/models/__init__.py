"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from chainvalue.models.base import Base
from chainvalue.models.contract_value import ContractValue
from chainvalue.models.enums import ValueSource

__all__ = [
    "Base",
    "ContractValue",
    "ValueSource",
]
