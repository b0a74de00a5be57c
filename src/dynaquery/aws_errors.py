from __future__ import annotations

from botocore.exceptions import ClientError

from .errors import AwsError, ConditionFailedError, DynaqueryError, NotFoundError, ValidationError

_MAPPED_CODES: dict[str, type[DynaqueryError]] = {
    "ConditionalCheckFailedException": ConditionFailedError,
    "ValidationException": ValidationError,
    "ResourceNotFoundException": NotFoundError,
}


def map_client_error(err: ClientError, *, operation: str | None = None) -> Exception:
    error = err.response.get("Error") or {}
    code = str(error.get("Code", ""))
    message = str(error.get("Message", "")) or str(err)
    if operation:
        message = f"{operation}: {message}"

    mapped = _MAPPED_CODES.get(code)
    if mapped is not None:
        return mapped(message)
    return AwsError(code=code or "UnknownError", message=message)
