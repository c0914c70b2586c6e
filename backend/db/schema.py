"""
Table bootstrap for development and tests.

Creates missing tables only; existing tables are never altered.
"""

import logging

from constants import CONTACT_TABLE, EMPLOYEE_TABLE

log = logging.getLogger(__name__)

CREATE_CONTACTS_TABLE = f"""
CREATE TABLE IF NOT EXISTS {CONTACT_TABLE} (
    contact_id VARCHAR(36) PRIMARY KEY,
    contact_name VARCHAR(255) NOT NULL,
    contact_phone VARCHAR(32) NOT NULL,
    contact_relation VARCHAR(255) NOT NULL
)
"""

CREATE_EMPLOYEES_TABLE = f"""
CREATE TABLE IF NOT EXISTS {EMPLOYEE_TABLE} (
    employee_id VARCHAR(36) PRIMARY KEY,
    employee_name VARCHAR(255) NOT NULL,
    employee_title VARCHAR(255) NOT NULL,
    employee_phone VARCHAR(32) NOT NULL,
    employee_mail VARCHAR(255) NOT NULL,
    employee_address_street VARCHAR(255) NOT NULL,
    employee_address_city VARCHAR(255) NOT NULL,
    employee_address_state VARCHAR(255) NOT NULL,
    primary_alternate_contact_id VARCHAR(36) NULL REFERENCES {CONTACT_TABLE} (contact_id),
    secondary_alternate_contact_id VARCHAR(36) NULL REFERENCES {CONTACT_TABLE} (contact_id)
)
"""

SCHEMA_STATEMENTS = (
    CREATE_CONTACTS_TABLE,
    CREATE_EMPLOYEES_TABLE,
)


async def create_tables(store) -> None:
    """Create the contact and employee tables if they do not exist."""
    for statement in SCHEMA_STATEMENTS:
        await store.execute(statement)
    log.info("schema_ready tables=%s,%s", CONTACT_TABLE, EMPLOYEE_TABLE)
