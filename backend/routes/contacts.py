"""
Contacts API Routes - alternate contacts that employees can reference

Endpoints:
- POST /contacts - Create a contact
"""

import logging
import uuid

from flask import Blueprint

from api.middleware import (
    middleware_chain,
    require_methods,
    require_body_params,
    require_body_param_validation,
    get_request_id,
)
from api.serializers import ResponseStatus, success_envelope
from constants import CONTACT_TABLE, PHONE_NUMBER_PATTERN
from db.store import get_store
from utils.validators import regexp_check, strlen_nz

logger = logging.getLogger(__name__)

contacts_bp = Blueprint('contacts', __name__)

INSERT_CONTACT_SQL = f"""
    INSERT INTO {CONTACT_TABLE} (contact_id, contact_name, contact_phone, contact_relation)
    VALUES (?, ?, ?, ?)
"""


@contacts_bp.route("/", methods=["POST"], strict_slashes=False)
@middleware_chain(
    require_methods("POST"),
    require_body_params("contactName", "contactPhone", "contactRelation"),
    require_body_param_validation({
        "contactName": strlen_nz,
        "contactPhone": regexp_check(PHONE_NUMBER_PATTERN),
        "contactRelation": strlen_nz,
    }),
)
async def create_contact(ctx, res):
    """
    Create a contact.

    Body:
        contactName, contactPhone, contactRelation

    Returns:
        {"responseStatus": "SUCCESS", "contactId": "<uuid4>"}
    """
    try:
        body = ctx.body
        new_contact_id = str(uuid.uuid4())

        await get_store().execute(
            INSERT_CONTACT_SQL,
            [new_contact_id, body["contactName"], body["contactPhone"], body["contactRelation"]],
        )

        res.json(success_envelope(contactId=new_contact_id))

    except Exception:
        logger.exception(f"POST /contacts failed request_id={get_request_id()}")
        res.error(ResponseStatus.ERR_INTERNAL_ERROR)
