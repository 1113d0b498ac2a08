# launchpad/api/responses.py
from __future__ import annotations

from typing import Any, Dict, Optional, Union

from fastapi.responses import JSONResponse

from launchpad.schemas.tokens import ErrorResponse

# OpenAPI documentation for the failure envelope shared by every router
ERROR_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 500)
}


class ApiError(Exception):
    """Raised from dependencies to short-circuit a request with the standard envelope."""

    def __init__(self, status_code: int, message: str, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error


def error_response(
    *,
    status_code: int,
    message: str,
    error: Optional[str] = None,
    debug: bool = False,
) -> JSONResponse:
    body = ErrorResponse(message=message, error=error if debug and error else None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))
