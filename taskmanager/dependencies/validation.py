from typing import Type

from fastapi import Request
from pydantic import BaseModel

from taskmanager.core.errors import ValidationError
from taskmanager.core.validation import check


def validated_body(model: Type[BaseModel]):
    """Dependency factory: parse the JSON body with ``model`` or fail with 400."""

    async def dependency(request: Request):
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError("Request body must be valid JSON")
        return check(model, data).unwrap()

    return dependency


def validated_query(model: Type[BaseModel]):
    """Same as ``validated_body`` for query strings. Blank values count as absent."""

    def dependency(request: Request):
        data = {k: v for k, v in request.query_params.items() if v.strip()}
        return check(model, data).unwrap()

    return dependency
