"""
Employees API Routes - employee records and their alternate contacts

Endpoints:
- POST   /employees               - Create an employee
- GET    /employees               - List employees (employeePage, pageSize)
- GET    /employees/<employeeId>  - Employee details with resolved contacts
- PUT    /employees/<employeeId>  - Partial update
- DELETE /employees/<employeeId>  - Delete an employee
"""

import logging
import uuid
from typing import Optional

from flask import Blueprint

from api.middleware import (
    middleware_chain,
    require_methods,
    require_url_params,
    require_body_params,
    require_url_param_validation,
    require_body_param_validation,
    require_query_param_validation,
    get_request_id,
)
from api.serializers import ResponseStatus, success_envelope
from constants import (
    CONTACT_TABLE,
    DEFAULT_EMPLOYEE_PAGE,
    DEFAULT_PAGE_SIZE,
    EMPLOYEE_CONTACT_FIELDS,
    EMPLOYEE_FIXED_FIELDS,
    EMPLOYEE_TABLE,
    MAX_PAGE_PARAM,
    PHONE_NUMBER_PATTERN,
)
from db.store import get_store
from models.employee import EmployeeContact, EmployeeData
from utils.validators import (
    ParseMethod,
    allow_nullish,
    parse_number,
    regexp_check,
    string_to_num,
    strlen_nz,
    valid_contact_id_check,
    valid_employee_id_check,
)

logger = logging.getLogger(__name__)

employees_bp = Blueprint('employees', __name__)

INSERT_EMPLOYEE_SQL = f"""
    INSERT INTO {EMPLOYEE_TABLE} (employee_id, employee_name, employee_title, employee_phone, employee_mail,
                                  employee_address_street, employee_address_city, employee_address_state)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""

SELECT_EMPLOYEE_SQL = f"SELECT * FROM {EMPLOYEE_TABLE} WHERE employee_id = ?"

SELECT_EMPLOYEE_PAGE_SQL = f"SELECT * FROM {EMPLOYEE_TABLE} ORDER BY employee_id LIMIT ? OFFSET ?"

SELECT_CONTACT_SQL = f"SELECT * FROM {CONTACT_TABLE} WHERE contact_id = ?"

UPDATE_EMPLOYEE_SQL = f"""
    UPDATE {EMPLOYEE_TABLE}
    SET employee_name                  = ?,
        employee_phone                 = ?,
        employee_title                 = ?,
        employee_mail                  = ?,
        employee_address_street        = ?,
        employee_address_city          = ?,
        employee_address_state         = ?,
        primary_alternate_contact_id   = ?,
        secondary_alternate_contact_id = ?
    WHERE employee_id = ?
"""

DELETE_EMPLOYEE_SQL = f"DELETE FROM {EMPLOYEE_TABLE} WHERE employee_id = ?"

phone_number_check = regexp_check(PHONE_NUMBER_PATTERN)


def page_param_in_range(value) -> bool:
    """1 <= value <= MAX_PAGE_PARAM"""
    return 0 < value <= MAX_PAGE_PARAM


page_param_check = string_to_num(page_param_in_range, ParseMethod.PARSE_INT)


async def _fetch_employee(store, employee_id: str) -> Optional[EmployeeData]:
    rows = await store.execute(SELECT_EMPLOYEE_SQL, [employee_id])
    if not rows:
        return None
    return EmployeeData.from_row(rows[0])


async def _fetch_contact(store, contact_id: Optional[str]) -> Optional[EmployeeContact]:
    if contact_id is None:
        return None
    rows = await store.execute(SELECT_CONTACT_SQL, [contact_id])
    if not rows:
        return None
    return EmployeeContact.from_row(rows[0])


# =============================================================================
# POST /employees
# =============================================================================

@employees_bp.route("/", methods=["POST"], strict_slashes=False)
@middleware_chain(
    require_methods("POST"),
    require_body_params(
        "employeeName", "employeeTitle", "employeeMail", "employeePhone",
        "employeeAddressStreet", "employeeAddressCity", "employeeAddressState",
    ),
    require_body_param_validation({
        "employeeName": strlen_nz,
        "employeeTitle": strlen_nz,
        "employeePhone": phone_number_check,
        "employeeMail": strlen_nz,
        "employeeAddressState": strlen_nz,
        "employeeAddressStreet": strlen_nz,
        "employeeAddressCity": strlen_nz,
    }),
)
async def create_employee(ctx, res):
    """
    Create an employee without alternate contacts.

    Returns:
        {"responseStatus": "SUCCESS", "employeeId": "<uuid4>"}
    """
    try:
        body = ctx.body
        new_employee_id = str(uuid.uuid4())

        await get_store().execute(
            INSERT_EMPLOYEE_SQL,
            [
                new_employee_id,
                body["employeeName"],
                body["employeeTitle"],
                body["employeePhone"],
                body["employeeMail"],
                body["employeeAddressStreet"],
                body["employeeAddressCity"],
                body["employeeAddressState"],
            ],
        )

        res.json(success_envelope(employeeId=new_employee_id))

    except Exception:
        logger.exception(f"POST /employees failed request_id={get_request_id()}")
        res.error(ResponseStatus.ERR_INTERNAL_ERROR)


# =============================================================================
# GET /employees
# =============================================================================

@employees_bp.route("/", methods=["GET"], strict_slashes=False)
@middleware_chain(
    require_methods("GET"),
    require_query_param_validation({
        "employeePage": allow_nullish(page_param_check),
        "pageSize": allow_nullish(page_param_check),
    }),
)
async def get_employees_data(ctx, res):
    """
    List one page of employees.

    Query params:
        - employeePage: 1-based page number (default 1)
        - pageSize: rows per page (default 10)

    Returns:
        {"responseStatus": "SUCCESS", "employeesData": [...]}
    """
    try:
        employee_page = DEFAULT_EMPLOYEE_PAGE
        page_size = DEFAULT_PAGE_SIZE
        if ctx.query.get("employeePage"):
            employee_page = parse_number(ctx.query["employeePage"], ParseMethod.PARSE_INT)
        if ctx.query.get("pageSize"):
            page_size = parse_number(ctx.query["pageSize"], ParseMethod.PARSE_INT)

        page_offset = (employee_page - 1) * page_size

        rows = await get_store().execute(SELECT_EMPLOYEE_PAGE_SQL, [page_size, page_offset])

        employees = [EmployeeData.from_row(row).to_api() for row in rows]
        res.json(success_envelope(employeesData=employees))

    except Exception:
        logger.exception(f"GET /employees failed request_id={get_request_id()}")
        res.error(ResponseStatus.ERR_INTERNAL_ERROR)


# =============================================================================
# GET /employees/<employeeId>
# =============================================================================

@employees_bp.route("/<employeeId>", methods=["GET"], strict_slashes=False)
@middleware_chain(
    require_methods("GET"),
    require_url_params("employeeId"),
    require_url_param_validation({
        "employeeId": valid_employee_id_check,
    }),
)
async def get_employee_details(ctx, res):
    """
    Employee details with primary and secondary contacts resolved.

    Returns:
        {
            "responseStatus": "SUCCESS",
            "employeeData": {..., "primaryContact": {...}|null, "secondaryContact": {...}|null}
        }
    """
    try:
        store = get_store()
        employee = await _fetch_employee(store, ctx.params["employeeId"])
        if employee is None:
            # Deleted between the existence check and this read
            res.error(ResponseStatus.ERR_NOT_FOUND)
            return

        primary_contact = await _fetch_contact(store, employee.primary_alternate_contact_id)
        secondary_contact = await _fetch_contact(store, employee.secondary_alternate_contact_id)

        res.json(success_envelope(
            employeeData=employee.to_details(primary_contact, secondary_contact)
        ))

    except Exception:
        logger.exception(f"GET /employees/<id> failed request_id={get_request_id()}")
        res.error(ResponseStatus.ERR_INTERNAL_ERROR)


# =============================================================================
# PUT /employees/<employeeId>
# =============================================================================

@employees_bp.route("/<employeeId>", methods=["PUT"], strict_slashes=False)
@middleware_chain(
    require_methods("PUT"),
    require_url_params("employeeId"),
    require_url_param_validation({
        "employeeId": valid_employee_id_check,
    }),
    require_body_param_validation({
        "employeeName": allow_nullish(strlen_nz),
        "employeeTitle": allow_nullish(strlen_nz),
        "employeePhone": allow_nullish(phone_number_check),
        "employeeMail": allow_nullish(strlen_nz),
        "employeeAddressState": allow_nullish(strlen_nz),
        "employeeAddressStreet": allow_nullish(strlen_nz),
        "employeeAddressCity": allow_nullish(strlen_nz),
        "primaryAlternateContactId": allow_nullish(valid_contact_id_check),
        "secondaryAlternateContactId": allow_nullish(valid_contact_id_check),
    }),
)
async def update_employee(ctx, res):
    """
    Partially update an employee.

    Fields missing from the body keep their stored value. The contact id
    fields can be cleared by sending them as null.

    Returns:
        {"responseStatus": "SUCCESS", "employeeData": {...merged row...}}
    """
    try:
        store = get_store()
        employee_id = ctx.params["employeeId"]
        body = ctx.body or {}

        current = await _fetch_employee(store, employee_id)
        if current is None:
            res.error(ResponseStatus.ERR_NOT_FOUND)
            return

        merged = current.to_api()
        for field_name in EMPLOYEE_FIXED_FIELDS:
            # NOT NULL columns: only overwrite with a provided value
            if body.get(field_name) is not None:
                merged[field_name] = body[field_name]

        for field_name in EMPLOYEE_CONTACT_FIELDS:
            if field_name in body:
                merged[field_name] = body[field_name]

        updated = EmployeeData.model_validate(merged)

        await store.execute(
            UPDATE_EMPLOYEE_SQL,
            [
                updated.employee_name,
                updated.employee_phone,
                updated.employee_title,
                updated.employee_mail,
                updated.employee_address_street,
                updated.employee_address_city,
                updated.employee_address_state,
                updated.primary_alternate_contact_id,
                updated.secondary_alternate_contact_id,
                employee_id,
            ],
        )

        res.json(success_envelope(employeeData=updated.to_api()))

    except Exception:
        logger.exception(f"PUT /employees/<id> failed request_id={get_request_id()}")
        res.error(ResponseStatus.ERR_INTERNAL_ERROR)


# =============================================================================
# DELETE /employees/<employeeId>
# =============================================================================

@employees_bp.route("/<employeeId>", methods=["DELETE"], strict_slashes=False)
@middleware_chain(
    require_methods("DELETE"),
    require_url_params("employeeId"),
    require_url_param_validation({
        "employeeId": valid_employee_id_check,
    }),
)
async def delete_employee(ctx, res):
    try:
        await get_store().execute(DELETE_EMPLOYEE_SQL, [ctx.params["employeeId"]])
        res.json(success_envelope())

    except Exception:
        logger.exception(f"DELETE /employees/<id> failed request_id={get_request_id()}")
        res.error(ResponseStatus.ERR_INTERNAL_ERROR)
