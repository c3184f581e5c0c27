import re
from typing import Any, List

ID_PATTERN = re.compile(r"^[a-f0-9]{10}$")
ID_LENGTH = 10


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_present_str(v: Any) -> bool:
    # whitespace counts: " " is a usable search term
    return isinstance(v, str) and v != ""


def _is_positive_int(v: Any) -> bool:
    # bool is an int subclass; True must not pass as page 1
    return isinstance(v, int) and not isinstance(v, bool) and v > 0


def is_valid_id(v: Any) -> bool:
    """True when v is exactly 10 lowercase hex characters."""
    return isinstance(v, str) and ID_PATTERN.fullmatch(v) is not None


def validate_skill(skill: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means the skill
    can be persisted.
    """
    errors: List[str] = []

    if not _is_non_empty_str(getattr(skill, "name", None)):
        errors.append("Skill is missing a name")

    skill_id = getattr(skill, "id", None)
    if skill_id is not None and not is_valid_id(skill_id):
        errors.append(f"Field 'id' must be {ID_LENGTH} lowercase hex characters")

    if not isinstance(getattr(skill, "authorized", False), bool):
        errors.append("Field 'authorized' must be a boolean")

    return errors


def validate_pagination(page: Any, results_per_page: Any) -> List[str]:
    errors: List[str] = []
    if not _is_positive_int(page):
        errors.append(f"Field 'page' must be a positive integer, got {page!r}")
    if not _is_positive_int(results_per_page):
        errors.append(
            f"Field 'results_per_page' must be a positive integer, got {results_per_page!r}"
        )
    return errors


def validate_lookup_id(skill_id: Any) -> List[str]:
    if not _is_present_str(skill_id):
        return ["ID cannot be empty"]
    return []


def validate_term(term: Any) -> List[str]:
    if not _is_present_str(term):
        return ["No search term supplied"]
    return []
