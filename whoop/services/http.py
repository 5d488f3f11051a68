"""
WHOOP HTTP Helpers
==================
Pieces shared by the API and OAuth clients: the error raised for non-2xx
responses, required-argument checks, and body parsing.
"""

from __future__ import annotations

from typing import Optional, TypeVar

import httpx
from pydantic import BaseModel

BASE_URL = "https://api.prod.whoop.com"

ModelT = TypeVar("ModelT", bound=BaseModel)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class WhoopAPIError(Exception):
    """Non-2xx response from the WHOOP API."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"WHOOP API error {status_code}: {body}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def require_text(value: Optional[str], name: str) -> str:
    """Return ``value`` unchanged, or raise ValueError if it is blank."""
    if value is None or not value.strip():
        raise ValueError(f"{name} cannot be null or empty")
    return value


def parse_response(response: httpx.Response, model: type[ModelT]) -> Optional[ModelT]:
    """Raise WhoopAPIError on non-2xx, else parse the body into ``model``.

    A success with no body yields None.
    """
    if not response.is_success:
        raise WhoopAPIError(response.status_code, response.text)
    if not response.content.strip():
        return None
    return model.model_validate_json(response.content)
