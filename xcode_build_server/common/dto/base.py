from datetime import datetime, timezone

from pydantic import BaseModel, Field, ConfigDict


class TimestampMixin(BaseModel):
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class BaseDTO(TimestampMixin):
    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        str_strip_whitespace=True,
    )
