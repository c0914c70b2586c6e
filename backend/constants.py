"""
Shared constants for the employee directory API.
"""

import re

# Table names
EMPLOYEE_TABLE = "employee_data"
CONTACT_TABLE = "employee_contacts"

# Optional country code (2-3 digits, then space or dash), then digits only
PHONE_NUMBER_PATTERN = re.compile(r"^(\+[0-9]{2,3}(\s|-)?)?[0-9]+$", re.IGNORECASE)

# Paging defaults for GET /employees
DEFAULT_EMPLOYEE_PAGE = 1
DEFAULT_PAGE_SIZE = 10

# Upper bound for employeePage / pageSize; keeps LIMIT and OFFSET inside a signed 64-bit int
MAX_PAGE_PARAM = 2**31 - 1

# Employee fields that are NOT NULL in the table
EMPLOYEE_FIXED_FIELDS = (
    "employeeTitle",
    "employeeMail",
    "employeePhone",
    "employeeName",
    "employeeAddressStreet",
    "employeeAddressCity",
    "employeeAddressState",
)

# Employee fields that reference employee_contacts and may be NULL
EMPLOYEE_CONTACT_FIELDS = (
    "primaryAlternateContactId",
    "secondaryAlternateContactId",
)
