"""Shared model configuration for project documents."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LabelspaceModel(BaseModel):
    """Base model serializing to the camelCase project wire format."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Return the JSON-ready camelCase representation of the model."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["LabelspaceModel"]
