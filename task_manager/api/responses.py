# PURPOSE: the JSON envelope used by every endpoint and the mapping from
# service error kinds to HTTP status codes.
#   success: {"statusCode", "message", "body"}
#   failure: {"statusCode", "message", "error"}  (error = HTTP reason phrase)

from http import HTTPStatus
from typing import Any

from fastapi.responses import JSONResponse

from ..results import ErrorKind, ServiceResult

GENERIC_ERROR_MESSAGE = "Something went wrong"

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
}


def success_response(message: str, body: Any = None) -> JSONResponse:
    content: dict[str, Any] = {"statusCode": HTTPStatus.OK.value, "message": message}
    if body is not None:
        content["body"] = body
    return JSONResponse(status_code=HTTPStatus.OK, content=content)


def error_response(status_code: int, message: Any, **extra: Any) -> JSONResponse:
    code = HTTPStatus(status_code)
    return JSONResponse(
        status_code=code.value,
        content={"statusCode": code.value, "message": message, "error": code.phrase, **extra},
    )


def internal_error_response() -> JSONResponse:
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def failure_response(result: ServiceResult) -> JSONResponse:
    """Translate a failed ServiceResult into its HTTP response."""
    status = ERROR_STATUS.get(result.error)
    if status is None:
        return internal_error_response()
    return error_response(status, result.message)
