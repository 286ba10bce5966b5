import asyncio
import json
from typing import Any, List, Optional, Type

import httpx
from pydantic import BaseModel

from .exceptions import ApiError


class APIResponse:
    """Wraps an httpx response and turns it into a decoded value or an ApiError"""
    response: httpx.Response

    def __init__(self, response: httpx.Response):
        self.response = response
        self.content_type = response.headers.get('Content-Type', '')

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def is_success(self) -> bool:
        return 200 <= self.response.status_code < 300

    async def parse_content(self) -> Any:
        """
        Parse the success body as JSON.

        204 No Content decodes to None. Any other body that is not valid JSON,
        an empty one included, raises the JSON decoder's ValueError as-is.
        """
        if self.response.status_code == 204:
            return None
        return await asyncio.to_thread(self.response.json)

    def error_body(self) -> dict:
        text = self.response.text
        try:
            data = json.loads(text)
        except ValueError:
            return {"message": text}
        # Valid JSON that is not an object carries no message
        if not isinstance(data, dict):
            return {}
        return data

    def to_api_error(self) -> ApiError:
        data = self.error_body()
        message = data.get("message") or f"HTTP {self.status_code}"
        return ApiError(str(message), self.status_code, _error_list(data.get("errors")))


def _error_list(errors: Any) -> Optional[List[str]]:
    if isinstance(errors, list):
        return [str(error) for error in errors]
    return None


def decode(data: Any, response_model: Optional[Type[BaseModel]] = None) -> Any:
    """Shape parsed JSON for the caller. Nothing is validated."""
    if response_model is None or data is None:
        return data
    if isinstance(data, dict):
        return response_model.model_construct(**data)
    if isinstance(data, list):
        return [response_model.model_construct(**item) if isinstance(item, dict) else item for item in data]
    return data
