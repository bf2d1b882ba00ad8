"""
Validation of caller-supplied matching criteria
"""

from collections.abc import Mapping
from typing import Any, Dict, List

import pydantic
from loguru import logger

from .exceptions import ValidationError
from .models import MatchingCriteria


def _field_errors(error: pydantic.ValidationError) -> Dict[str, List[str]]:
    """Group pydantic error messages by top-level field name"""
    errors: Dict[str, List[str]] = {}
    for item in error.errors():
        location = item.get('loc') or ('criteria',)
        field_name = str(location[0])
        errors.setdefault(field_name, []).append(item.get('msg', 'invalid value'))
    return errors


def validate_criteria(raw: Any) -> MatchingCriteria:
    """
    Validate and normalize a matching request

    Args:
        raw: Form payload (camelCase or snake_case keys) or MatchingCriteria

    Returns:
        Normalized MatchingCriteria with defaults filled in

    Raises:
        ValidationError: If the payload is not a mapping or any field is invalid
    """
    if isinstance(raw, MatchingCriteria):
        return raw
    if not isinstance(raw, Mapping):
        raise ValidationError(
            "Invalid matching criteria",
            {'criteria': [f"expected an object, got {type(raw).__name__}"]},
        )

    try:
        criteria = MatchingCriteria(**dict(raw))
    except pydantic.ValidationError as e:
        errors = _field_errors(e)
        logger.warning(f"Rejected matching criteria: {errors}")
        raise ValidationError("Invalid matching criteria", errors)

    logger.debug(
        f"Validated criteria: tuition={criteria.tuition_amount}, "
        f"preference={criteria.preferred_rewards_type}, tier={criteria.credit_score_range}"
    )
    return criteria
