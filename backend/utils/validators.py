"""
Validator Library
=================

Single-value predicates for the validation gates in api.middleware.pipeline.

A validator takes one value (possibly None) and returns a bool, or an
awaitable of bool. Factories (strlen_gt, regexp_check, allow_nullish, ...)
return validators configured once at route definition time.

Usage:
    from utils.validators import allow_nullish, string_to_num, non_zero_non_negative

    require_query_param_validation({
        "pageSize": allow_nullish(string_to_num(non_zero_non_negative)),
    })

Validators that receive None must be wrapped in allow_nullish/disallow_nullish;
the string predicates return False for anything that is not a str.
"""

import inspect
import logging
import math
import re
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Pattern, Union

from constants import CONTACT_TABLE, EMPLOYEE_TABLE
from db.store import StoreError, get_store

logger = logging.getLogger(__name__)

Validator = Callable[[Any], Union[bool, Awaitable[bool]]]


class ParseMethod(Enum):
    PARSE_INT = "int"
    PARSE_FLOAT = "float"


# Leading-prefix number syntax: "12abc" -> 12, "  -3.5e2px" -> -350.0
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)


async def resolve(result: Union[bool, Awaitable[bool]]) -> bool:
    """Await a validator result if it is awaitable."""
    if inspect.isawaitable(result):
        result = await result
    return bool(result)


# =============================================================================
# Numeric predicates
# =============================================================================

def non_zero(value) -> bool:
    """value < 0 or value > 0"""
    return value != 0


def non_negative(value) -> bool:
    """value >= 0"""
    return value >= 0


def non_zero_non_negative(value) -> bool:
    """value > 0"""
    return value > 0


def non_zero_non_positive(value) -> bool:
    """value < 0"""
    return value < 0


def passthrough(value) -> bool:
    """Always True. Marks a field as allowed without any validation."""
    return True


# =============================================================================
# String predicates
# =============================================================================

def strlen_gt(length: int) -> Validator:
    def check(value) -> bool:
        return isinstance(value, str) and len(value) > length
    return check


def strlen_gt_eq(length: int) -> Validator:
    def check(value) -> bool:
        return isinstance(value, str) and len(value) >= length
    return check


def strlen_eq(length: int) -> Validator:
    def check(value) -> bool:
        return isinstance(value, str) and len(value) == length
    return check


def strlen_lt_eq(length: int) -> Validator:
    def check(value) -> bool:
        return isinstance(value, str) and len(value) <= length
    return check


def strlen_lt(length: int) -> Validator:
    def check(value) -> bool:
        return isinstance(value, str) and len(value) < length
    return check


def strlen_nz(value) -> bool:
    """Non-empty string."""
    return isinstance(value, str) and len(value) > 0


def regexp_check(pattern: Union[str, Pattern]) -> Validator:
    """
    True if the string contains at least one match of `pattern`.

    Uses Pattern.search, which keeps no match position between calls, so the
    same compiled pattern can be shared by every request.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def check(value) -> bool:
        if not isinstance(value, str):
            return False
        return compiled.search(value) is not None
    return check


# =============================================================================
# Containment predicates
# =============================================================================

def in_arr(values: Iterable[Any]) -> Validator:
    allowed = list(values)

    def check(value) -> bool:
        return value in allowed
    return check


def not_in_arr(values: Iterable[Any]) -> Validator:
    disallowed = list(values)

    def check(value) -> bool:
        return value not in disallowed
    return check


# =============================================================================
# Adapters
# =============================================================================

def allow_nullish(fn: Validator) -> Validator:
    """None passes without calling `fn`; anything else is validated by `fn`."""
    async def check(value) -> bool:
        if value is None:
            return True
        return await resolve(fn(value))
    return check


def disallow_nullish(fn: Validator) -> Validator:
    """None fails without calling `fn`; anything else is validated by `fn`."""
    async def check(value) -> bool:
        if value is None:
            return False
        return await resolve(fn(value))
    return check


def parse_number(value: Any, parse_method: ParseMethod = ParseMethod.PARSE_INT):
    """
    Parse the leading number of a string.

    Returns:
        int (PARSE_INT) or float (PARSE_FLOAT); float('nan') if no number
        can be read from the start of the string.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return math.nan

    if parse_method is ParseMethod.PARSE_INT:
        match = _INT_PREFIX.match(value)
        return int(match.group(1)) if match else math.nan

    match = _FLOAT_PREFIX.match(value)
    if not match:
        return math.nan
    token = match.group(1).replace("Infinity", "inf")
    return float(token)


def string_to_num(
    fn: Callable[[Any], Union[bool, Awaitable[bool]]],
    parse_method: ParseMethod = ParseMethod.PARSE_INT,
) -> Validator:
    """
    Parse a string (usually a URL or query param) and validate the number.

    Not-a-number and infinite results fail without calling `fn`.
    """
    async def check(value) -> bool:
        parsed = parse_number(value, parse_method)
        if isinstance(parsed, float) and not math.isfinite(parsed):
            return False
        return await resolve(fn(parsed))
    return check


# =============================================================================
# Store-backed predicates
# =============================================================================

def record_exists(table: str, id_column: str) -> Validator:
    """
    Build a predicate that is True when a row with the given id exists.

    Store errors are logged and reported as a failed validation, so an
    unreachable database makes a valid id look invalid.
    """
    query = f"SELECT 1 FROM {table} WHERE {id_column} = ?"

    async def check(value) -> bool:
        try:
            rows = await get_store().execute(query, [value])
        except StoreError:
            logger.exception(f"Existence check failed for {table}.{id_column}")
            return False
        return len(rows) > 0
    return check


valid_employee_id_check = record_exists(EMPLOYEE_TABLE, "employee_id")
valid_contact_id_check = record_exists(CONTACT_TABLE, "contact_id")
