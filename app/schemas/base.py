from datetime import date, datetime
from typing import Annotated, Any, Optional
from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel


def blank_to_none(value: Any) -> Any:
    """Treat missing, empty and whitespace-only strings as null."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def reject_null(value: Any) -> Any:
    """Fields that may be omitted from an update but never cleared."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


# Optional fields where "" means null
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]
OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(blank_to_none)]
OptionalDate = Annotated[Optional[date], BeforeValidator(blank_to_none)]
OptionalNumber = Annotated[Optional[float], BeforeValidator(blank_to_none)]


class CamelModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BaseSchema(CamelModel):
    id: str
    created_at: datetime
    updated_at: datetime
