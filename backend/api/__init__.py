"""
API package - request gating and response envelopes.

This package provides:
- Route middleware pipeline (method / required params / validation gates)
- Response envelope helpers (responseStatus)
- Global middleware (request_id, request logging, error envelope)
"""

from .middleware import middleware_chain
from .serializers import ResponseStatus

__all__ = ['middleware_chain', 'ResponseStatus']
