from __future__ import annotations

import re

from .errors import EmptyAttributeNameError, ValidationError

MaxAttributeNameLength = 255
MaxTableNameLength = 255

_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")


def validate_attribute_name(name: object) -> str:
    """Reject empty, oversized and control-character attribute names.

    DynamoDB accepts any UTF-8 attribute name, but an expression placeholder
    may only hold ``[A-Za-z0-9_]``. Escaping rewrites the reserved ``#`` only,
    so names with spaces, ``-``, ``.`` or other punctuation pass this check and
    still yield placeholders DynamoDB rejects. Such attribute names must be
    avoided by the model layer that chooses them.
    """
    if not isinstance(name, str) or not name:
        raise EmptyAttributeNameError(name)
    if len(name) > MaxAttributeNameLength:
        raise ValidationError(f"attribute name exceeds maximum length: {name[:32]}...")
    if _contains_control_characters(name):
        raise ValidationError("attribute name contains control characters")
    return name


def validate_table_name(name: str) -> None:
    if len(name) < 3 or len(name) > MaxTableNameLength:
        raise ValidationError(f"table name length invalid: {name!r}")
    if _NAME_PATTERN.match(name) is None:
        raise ValidationError(f"table name contains invalid characters: {name!r}")


def validate_index_name(name: str) -> None:
    if len(name) < 3 or len(name) > MaxTableNameLength:
        raise ValidationError(f"index name length invalid: {name!r}")
    if _NAME_PATTERN.match(name) is None:
        raise ValidationError(f"index name contains invalid characters: {name!r}")


def _contains_control_characters(value: str) -> bool:
    for ch in value:
        code = ord(ch)
        if 0 <= code <= 0x1F or code == 0x7F:
            return True
    return False
