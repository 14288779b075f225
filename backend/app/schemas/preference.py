from pydantic import BaseModel, Field, field_validator


def _dedupe(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    return list(dict.fromkeys(item.strip() for item in value if item.strip()))


class PreferencesUpdate(BaseModel):
    enabled_slot_type_ids: list[str] | None = Field(default=None, max_length=200)
    selected_batch_ids: list[str] | None = Field(default=None, max_length=200)

    @field_validator("enabled_slot_type_ids", "selected_batch_ids")
    @classmethod
    def normalize_ids(cls, value: list[str] | None) -> list[str] | None:
        return _dedupe(value)


class PreferencesOut(BaseModel):
    enabled_slot_type_ids: list[str] | None = None
    selected_batch_ids: list[str] | None = None
