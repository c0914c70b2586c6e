"""
Middleware for API requests.

Provides:
- Route gate pipeline (method, required params, param validation)
- Request ID injection (X-Request-ID)
- Sampled request logging
- Error envelope fallbacks (404 / 405 / 500)
"""

from .pipeline import (
    RequestContext,
    ResponseSink,
    RequestSection,
    URL_PARAMS,
    BODY_PARAMS,
    QUERY_PARAMS,
    PipelineError,
    ResponseAlreadySent,
    run_pipeline,
    middleware_chain,
    require_methods,
    require_params,
    require_param_validation,
    require_url_params,
    require_body_params,
    require_query_params,
    require_url_param_validation,
    require_body_param_validation,
    require_query_param_validation,
)
from .request_id import setup_request_id_middleware, get_request_id
from .request_logging import setup_request_logging_middleware
from .error_envelope import setup_error_handlers

__all__ = [
    'RequestContext',
    'ResponseSink',
    'RequestSection',
    'URL_PARAMS',
    'BODY_PARAMS',
    'QUERY_PARAMS',
    'PipelineError',
    'ResponseAlreadySent',
    'run_pipeline',
    'middleware_chain',
    'require_methods',
    'require_params',
    'require_param_validation',
    'require_url_params',
    'require_body_params',
    'require_query_params',
    'require_url_param_validation',
    'require_body_param_validation',
    'require_query_param_validation',
    'setup_request_id_middleware',
    'get_request_id',
    'setup_request_logging_middleware',
    'setup_error_handlers',
]
