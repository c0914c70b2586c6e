"""
Route middleware pipeline - ordered gates in front of a terminal handler.

A route is declared as a chain of gates followed by its handler:

    @employees_bp.route("/", methods=["POST"])
    @middleware_chain(
        require_methods("POST"),
        require_body_params("employeeName", "employeeTitle"),
        require_body_param_validation({
            "employeeName": strlen_nz,
            "employeeTitle": strlen_nz,
        }),
    )
    async def create_employee(ctx, res):
        ...

Each gate is `async def gate(ctx, res, next_)`. A gate either awaits
`next_()` to hand over to the following stage, or writes a 400 response to
`res` and returns. Once a response is written nothing else runs: later gates
and the handler are skipped, and a second write raises ResponseAlreadySent.
Side effects of gates that already ran (e.g. store lookups) are not undone.

The request sections (URL params, body, query) are described once by a
RequestSection, so required-key and validation gates share one implementation.
"""

import functools
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence

from flask import jsonify, request

from api.serializers.response import (
    ResponseStatus,
    STATUS_CODES,
    error_envelope,
)
from utils.validators import Validator, resolve

logger = logging.getLogger('api.middleware.pipeline')

Next = Callable[[], Awaitable[None]]
Stage = Callable[["RequestContext", "ResponseSink", Next], Optional[Awaitable[None]]]
Handler = Callable[["RequestContext", "ResponseSink"], Optional[Awaitable[None]]]

REQUEST_METHODS = ("GET", "PUT", "DELETE", "POST")


class PipelineError(RuntimeError):
    """Raised when a stage misuses the pipeline contract."""
    pass


class ResponseAlreadySent(PipelineError):
    """Raised on a second write to the same ResponseSink."""
    pass


# =============================================================================
# Request context and response sink
# =============================================================================

@dataclass
class RequestContext:
    """
    Per-request view of the three input sections.

    `body` is None when the request carried no JSON object.
    """
    method: str
    params: Optional[Mapping[str, Any]] = field(default_factory=dict)
    body: Optional[Mapping[str, Any]] = None
    query: Optional[Mapping[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_flask(cls, req) -> "RequestContext":
        body = req.get_json(silent=True)
        if not isinstance(body, dict):
            body = None
        return cls(
            method=req.method.upper(),
            params=dict(req.view_args or {}),
            body=body,
            query=req.args.to_dict(),
        )


class ResponseSink:
    """Collects the single response of a request."""

    def __init__(self):
        self.status_code: Optional[int] = None
        self.body: Optional[Dict[str, Any]] = None

    @property
    def sent(self) -> bool:
        return self.status_code is not None

    def json(self, body: Dict[str, Any], status_code: int = 200) -> None:
        if self.sent:
            raise ResponseAlreadySent(
                f"Response already sent with status {self.status_code}"
            )
        self.status_code = status_code
        self.body = body

    def error(
        self,
        status: ResponseStatus,
        missing_params: Optional[List[str]] = None,
        invalid_params: Optional[List[str]] = None,
    ) -> None:
        self.json(
            error_envelope(status, missing_params=missing_params, invalid_params=invalid_params),
            STATUS_CODES[ResponseStatus(status)],
        )

    def to_flask(self):
        return jsonify(self.body), self.status_code


# =============================================================================
# Request sections
# =============================================================================

@dataclass(frozen=True)
class RequestSection:
    """Which part of the request a gate reads and how it reports failures."""
    name: str
    accessor: Callable[[RequestContext], Optional[Mapping[str, Any]]]
    missing_status: ResponseStatus
    invalid_status: ResponseStatus


URL_PARAMS = RequestSection(
    name="url",
    accessor=lambda ctx: ctx.params,
    missing_status=ResponseStatus.ERR_MISSING_URL_PARAMS,
    invalid_status=ResponseStatus.ERR_INVALID_URL_PARAMS,
)

BODY_PARAMS = RequestSection(
    name="body",
    accessor=lambda ctx: ctx.body,
    missing_status=ResponseStatus.ERR_MISSING_BODY_PARAMS,
    invalid_status=ResponseStatus.ERR_INVALID_BODY_PARAMS,
)

QUERY_PARAMS = RequestSection(
    name="query",
    accessor=lambda ctx: ctx.query,
    missing_status=ResponseStatus.ERR_MISSING_QUERY_PARAMS,
    invalid_status=ResponseStatus.ERR_INVALID_QUERY_PARAMS,
)


# =============================================================================
# Pipeline runner
# =============================================================================

async def _maybe_await(result) -> None:
    if inspect.isawaitable(result):
        await result


async def run_pipeline(
    stages: Sequence[Stage],
    handler: Handler,
    ctx: RequestContext,
    res: ResponseSink,
) -> None:
    """
    Run `stages` in order, then `handler` if every stage continued.

    A stage that writes to `res` ends the chain even if it also calls next_.
    """
    async def dispatch(index: int) -> None:
        if res.sent:
            return
        if index == len(stages):
            await _maybe_await(handler(ctx, res))
            return

        called = False

        async def next_() -> None:
            nonlocal called
            if called:
                raise PipelineError(f"next() called twice by stage {index}")
            called = True
            await dispatch(index + 1)

        await _maybe_await(stages[index](ctx, res, next_))

    await dispatch(0)


def middleware_chain(*stages: Stage):
    """
    Turn a terminal handler into an async Flask view guarded by `stages`.

    The handler receives (ctx, res) and must write exactly one response.
    """
    def decorator(handler: Handler):
        @functools.wraps(handler)
        async def view(**_view_args):
            ctx = RequestContext.from_flask(request)
            res = ResponseSink()
            await run_pipeline(stages, handler, ctx, res)

            if not res.sent:
                logger.error(f"Handler {handler.__name__} returned without a response")
                res.error(ResponseStatus.ERR_INTERNAL_ERROR)

            return res.to_flask()

        view.stages = tuple(stages)
        view.handler = handler
        return view
    return decorator


# =============================================================================
# Gates
# =============================================================================

def require_methods(*methods: str) -> Stage:
    """
    Allow only the given HTTP methods.

    Any other method gets 400 ERR_INVALID_METHOD.
    """
    allowed = tuple(m.upper() for m in methods)
    for method in allowed:
        if method not in REQUEST_METHODS:
            raise ValueError(f"Unsupported request method: {method}")

    async def gate(ctx: RequestContext, res: ResponseSink, next_: Next) -> None:
        if ctx.method.upper() in allowed:
            await next_()
            return

        logger.debug(f"Rejected method {ctx.method} (allowed: {', '.join(allowed)})")
        res.error(ResponseStatus.ERR_INVALID_METHOD)

    return gate


def require_params(section: RequestSection, *required: str) -> Stage:
    """
    Ensure every name in `required` is set in `section`.

    Only checks presence; values are checked by require_param_validation.
    A key holding None (JSON null) counts as missing.
    """
    required_names = list(dict.fromkeys(required))

    async def gate(ctx: RequestContext, res: ResponseSink, next_: Next) -> None:
        values = section.accessor(ctx)

        if values is None:
            if required_names:
                logger.debug(f"Missing {section.name} section entirely")
                res.error(section.missing_status, missing_params=required_names)
                return
            await next_()
            return

        missing = [
            name for name in required_names
            if name not in values or values[name] is None
        ]
        if missing:
            logger.debug(f"Missing {section.name} params: {missing}")
            res.error(section.missing_status, missing_params=missing)
            return

        await next_()

    return gate


def require_param_validation(section: RequestSection, validators: Mapping[str, Validator]) -> Stage:
    """
    Validate `section` values against a validation map.

    Every field in the map is validated, in map order, even after an earlier
    one failed. Fields not in the map are never looked at. A field absent from
    the request is validated as None.
    """
    validation_map = dict(validators)

    async def gate(ctx: RequestContext, res: ResponseSink, next_: Next) -> None:
        values = section.accessor(ctx) or {}

        results: Dict[str, bool] = {}
        for name, validator in validation_map.items():
            results[name] = await resolve(validator(values.get(name)))

        invalid = [name for name, valid in results.items() if not valid]
        if invalid:
            logger.debug(f"Invalid {section.name} params: {invalid}")
            res.error(section.invalid_status, invalid_params=invalid)
            return

        await next_()

    return gate


def require_url_params(*required: str) -> Stage:
    return require_params(URL_PARAMS, *required)


def require_body_params(*required: str) -> Stage:
    return require_params(BODY_PARAMS, *required)


def require_query_params(*required: str) -> Stage:
    return require_params(QUERY_PARAMS, *required)


def require_url_param_validation(validators: Mapping[str, Validator]) -> Stage:
    return require_param_validation(URL_PARAMS, validators)


def require_body_param_validation(validators: Mapping[str, Validator]) -> Stage:
    return require_param_validation(BODY_PARAMS, validators)


def require_query_param_validation(validators: Mapping[str, Validator]) -> Stage:
    return require_param_validation(QUERY_PARAMS, validators)
