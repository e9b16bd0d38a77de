from __future__ import annotations

import math
import re


MIN_DAYS_POST_OP = 1
MAX_DAYS_POST_OP = 365

_PROCEDURE_ID_RE = re.compile(r"^[a-z][a-z0-9_]{0,63}$")


class ValidationError(Exception):
    pass


class InvalidDayValue(ValidationError):
    def __init__(self, value: object) -> None:
        super().__init__(
            f"days_post_op must be between {MIN_DAYS_POST_OP} and {MAX_DAYS_POST_OP}, got {value}"
        )
        self.value = value


def validate_days_post_op(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDayValue(value)
    if not (MIN_DAYS_POST_OP <= value <= MAX_DAYS_POST_OP):
        raise InvalidDayValue(value)
    return value


def clamp_days_post_op(value: int | float) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDayValue(value)
    if math.isnan(value):
        raise InvalidDayValue(value)
    if value <= MIN_DAYS_POST_OP:
        return MIN_DAYS_POST_OP
    if value >= MAX_DAYS_POST_OP:
        return MAX_DAYS_POST_OP
    return int(value)


def validate_procedure_id(value: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError("procedure_id must not be empty")
    if not _PROCEDURE_ID_RE.match(cleaned):
        raise ValidationError(
            f"procedure_id '{cleaned}' must be lowercase letters, digits or underscores"
        )
    return cleaned


def validate_top_k(value: int) -> int:
    if not (1 <= value <= 20):
        raise ValidationError(f"top_k must be between 1 and 20, got {value}")
    return value
