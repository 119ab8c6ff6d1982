from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Record exchanged with the API; camelCase on the wire, snake_case here."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "ignore",
    }

    def to_payload(self, **kwargs):
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, **kwargs)


def match_enum(enum_cls, value):
    """Case/spacing tolerant lookup of an enum member by value or label."""
    if isinstance(value, enum_cls):
        return value
    normalized = str(value).strip().lower().replace(' ', '_')
    try:
        return next(m for m in enum_cls if m.value == normalized)
    except StopIteration:
        raise ValueError(f"Invalid {enum_cls.__name__}: {value}")
