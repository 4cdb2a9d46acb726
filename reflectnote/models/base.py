"""Shared configuration for persisted record models."""

from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """Persisted record; serialized with camelCase keys, unknown keys kept."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='allow',
    )

    @model_serializer(mode='wrap')
    def omit_empty_fields(self, handler):
        # Declared optional fields are left out when empty; unknown keys are
        # written back exactly as stored, nulls included.
        data = handler(self)
        extra = self.model_extra or {}
        return {key: value for key, value in data.items() if value is not None or key in extra}
