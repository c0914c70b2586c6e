"""
Response serializers and envelope helpers.
"""

from .response import ResponseStatus, STATUS_CODES, success_envelope, error_envelope

__all__ = ['ResponseStatus', 'STATUS_CODES', 'success_envelope', 'error_envelope']
