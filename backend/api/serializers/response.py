"""
Response envelope helpers.

Every JSON body carries a `responseStatus` from a closed set:

    SUCCESS                          200
    ERR_NOT_FOUND                    404
    ERR_INTERNAL_ERROR               500
    ERR_INVALID_METHOD               400 (method not in allow-list)
    ERR_MISSING_{URL,QUERY,BODY}_PARAMS   400 + missingParams
    ERR_INVALID_{URL,QUERY,BODY}_PARAMS   400 + invalidParams
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ResponseStatus(str, Enum):
    SUCCESS = "SUCCESS"
    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_INTERNAL_ERROR = "ERR_INTERNAL_ERROR"
    ERR_INVALID_METHOD = "ERR_INVALID_METHOD"
    ERR_MISSING_URL_PARAMS = "ERR_MISSING_URL_PARAMS"
    ERR_MISSING_QUERY_PARAMS = "ERR_MISSING_QUERY_PARAMS"
    ERR_MISSING_BODY_PARAMS = "ERR_MISSING_BODY_PARAMS"
    ERR_INVALID_URL_PARAMS = "ERR_INVALID_URL_PARAMS"
    ERR_INVALID_QUERY_PARAMS = "ERR_INVALID_QUERY_PARAMS"
    ERR_INVALID_BODY_PARAMS = "ERR_INVALID_BODY_PARAMS"


# Default HTTP status per response status
STATUS_CODES = {
    ResponseStatus.SUCCESS: 200,
    ResponseStatus.ERR_NOT_FOUND: 404,
    ResponseStatus.ERR_INTERNAL_ERROR: 500,
    ResponseStatus.ERR_INVALID_METHOD: 400,
    ResponseStatus.ERR_MISSING_URL_PARAMS: 400,
    ResponseStatus.ERR_MISSING_QUERY_PARAMS: 400,
    ResponseStatus.ERR_MISSING_BODY_PARAMS: 400,
    ResponseStatus.ERR_INVALID_URL_PARAMS: 400,
    ResponseStatus.ERR_INVALID_QUERY_PARAMS: 400,
    ResponseStatus.ERR_INVALID_BODY_PARAMS: 400,
}


def success_envelope(**data: Any) -> Dict[str, Any]:
    """
    Build a success body.

    Usage:
        success_envelope(contactId=new_id)
        -> {"responseStatus": "SUCCESS", "contactId": "..."}
    """
    response = {"responseStatus": ResponseStatus.SUCCESS.value}
    response.update(data)
    return response


def error_envelope(
    status: ResponseStatus,
    missing_params: Optional[List[str]] = None,
    invalid_params: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Build an error body.

    Args:
        status: One of the ERR_* statuses
        missing_params: Field names for ERR_MISSING_* statuses
        invalid_params: Field names for ERR_INVALID_*_PARAMS statuses

    Returns:
        {"responseStatus": "...", "missingParams"|"invalidParams": [...]}
    """
    response: Dict[str, Any] = {"responseStatus": ResponseStatus(status).value}

    if missing_params is not None:
        response["missingParams"] = list(missing_params)
    if invalid_params is not None:
        response["invalidParams"] = list(invalid_params)

    return response
