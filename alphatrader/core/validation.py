from typing import TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from .errors import ApiError, ErrorCode

T = TypeVar("T", bound=BaseModel)


def validation_message(errors: list) -> str:
    """First pydantic error as a readable sentence."""
    if not errors:
        return "Invalid request data"
    first = errors[0]
    message = str(first.get("msg", "Invalid request data"))
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


def validation_details(errors: list) -> dict:
    return {"validationErrors": [{"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg")} for e in errors]}


async def validate_request(request: Request, schema: type[T]) -> T:
    """Parse the JSON body into ``schema``, turning every failure into a 400."""
    try:
        data = await request.json()
    except ValueError:
        raise ApiError(ErrorCode.VALIDATION_ERROR, "Request body must be valid JSON", status_code=400)

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        raise ApiError(ErrorCode.VALIDATION_ERROR, validation_message(errors), status_code=400,
                       details=validation_details(errors))
