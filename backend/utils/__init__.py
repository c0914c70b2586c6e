"""
Utility modules for the backend.
"""
from .validators import (
    Validator,
    ParseMethod,
    resolve,
    non_zero,
    non_negative,
    non_zero_non_negative,
    non_zero_non_positive,
    passthrough,
    strlen_gt,
    strlen_gt_eq,
    strlen_eq,
    strlen_lt_eq,
    strlen_lt,
    strlen_nz,
    regexp_check,
    in_arr,
    not_in_arr,
    allow_nullish,
    disallow_nullish,
    parse_number,
    string_to_num,
    record_exists,
    valid_employee_id_check,
    valid_contact_id_check,
)

__all__ = [
    'Validator',
    'ParseMethod',
    'resolve',
    'non_zero',
    'non_negative',
    'non_zero_non_negative',
    'non_zero_non_positive',
    'passthrough',
    'strlen_gt',
    'strlen_gt_eq',
    'strlen_eq',
    'strlen_lt_eq',
    'strlen_lt',
    'strlen_nz',
    'regexp_check',
    'in_arr',
    'not_in_arr',
    'allow_nullish',
    'disallow_nullish',
    'parse_number',
    'string_to_num',
    'record_exists',
    'valid_employee_id_check',
    'valid_contact_id_check',
]
