"""
Request payload decoding for endpoints that accept more than one encoding.

Some clients send multipart forms (with file uploads) where nested values
arrive as JSON strings, others send JSON bodies that were encoded twice.
Everything is decoded here in one place so the domain layer only ever sees
a plain dict, and anything malformed is rejected instead of guessed at.
"""

import json
import logging
from typing import Any, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from ..errors import ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def decode_json_value(value: Any, field: str) -> Any:
    """Decode a value that may be a JSON-encoded string. Non-strings pass through."""
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    if not stripped.startswith(("{", "[", '"')):
        return value
    try:
        return json.loads(stripped)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid {field} format") from e


async def read_payload(request: Request) -> tuple[dict, list[UploadFile]]:
    """
    Read a JSON or form request body.

    Returns the fields as a dict plus any uploaded files (form bodies only).
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        fields: dict = {}
        files: list[UploadFile] = []
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if value.filename:
                    files.append(value)
            else:
                fields[key] = value
        return fields, files

    body = await request.body()
    if not body.strip():
        return {}, []

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Invalid JSON body") from e

    # Double-encoded bodies get exactly one more decode
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValidationError("Invalid JSON body") from e

    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload, []


def parse_model(model: Type[ModelT], payload: dict) -> ModelT:
    """Validate a decoded payload, reporting failures in the standard error shape"""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")}
            for err in e.errors()
        ]
        logger.warning(f"Payload validation failed for {model.__name__}: {errors}")
        raise ValidationError("Validation error", errors=errors) from e
