"""
Base pydantic model shared by every schema in the package.

Centralizes the model configuration so accumulators, configuration values, and
parsed records serialize and validate consistently.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

__all__ = ["StandardBaseModel"]


class StandardBaseModel(BaseModel):
    """
    Base model with the package-wide pydantic configuration.

    Ignores unknown fields, stores enum members as their values, allows
    construction from attribute-bearing objects, and permits arbitrary types such
    as injected random sources.
    """

    model_config = ConfigDict(
        extra="ignore",
        use_enum_values=True,
        from_attributes=True,
        arbitrary_types_allowed=True,
    )
