"""
Tests for the route gate pipeline (api/middleware/pipeline.py).

Gates are driven directly with RequestContext / ResponseSink, then once
through middleware_chain on a throwaway Flask app.
"""

import asyncio

import pytest
from flask import Flask

from api.middleware.pipeline import (
    PipelineError,
    RequestContext,
    ResponseAlreadySent,
    ResponseSink,
    middleware_chain,
    require_body_param_validation,
    require_body_params,
    require_methods,
    require_query_param_validation,
    require_query_params,
    require_url_param_validation,
    require_url_params,
    run_pipeline,
)
from utils.validators import allow_nullish, strlen_nz


async def _ok_handler(ctx, res):
    res.json({"responseStatus": "SUCCESS"})


def run_stages(ctx, *stages, handler=_ok_handler):
    res = ResponseSink()
    asyncio.run(run_pipeline(stages, handler, ctx, res))
    return res


def ctx_for(method="GET", params=None, body=None, query=None):
    return RequestContext(
        method=method,
        params={} if params is None else params,
        body=body,
        query={} if query is None else query,
    )


class TestRequireMethods:
    def test_allowed_method_proceeds(self):
        res = run_stages(ctx_for("POST"), require_methods("POST"))
        assert res.status_code == 200
        assert res.body == {"responseStatus": "SUCCESS"}

    def test_any_of_several(self):
        res = run_stages(ctx_for("PUT"), require_methods("GET", "PUT"))
        assert res.status_code == 200

    def test_other_method_rejected_with_400(self):
        res = run_stages(ctx_for("DELETE"), require_methods("GET", "POST"))
        assert res.status_code == 400
        assert res.body == {"responseStatus": "ERR_INVALID_METHOD"}

    def test_unknown_method_in_config(self):
        with pytest.raises(ValueError):
            require_methods("PATCH")


class TestRequireParams:
    def test_all_present(self):
        ctx = ctx_for(body={"a": "1", "b": ""})
        res = run_stages(ctx, require_body_params("a", "b"))
        assert res.status_code == 200

    def test_missing_keys_reported(self):
        ctx = ctx_for(body={"a": "1", "c": None})
        res = run_stages(ctx, require_body_params("a", "b", "c"))
        assert res.status_code == 400
        assert res.body["responseStatus"] == "ERR_MISSING_BODY_PARAMS"
        assert set(res.body["missingParams"]) == {"b", "c"}

    def test_duplicates_collapsed(self):
        res = run_stages(ctx_for(body={}), require_body_params("a", "a", "b"))
        assert res.body["missingParams"] == ["a", "b"]

    def test_absent_body_reports_full_list(self):
        res = run_stages(ctx_for(body=None), require_body_params("a", "b"))
        assert res.status_code == 400
        assert res.body == {
            "responseStatus": "ERR_MISSING_BODY_PARAMS",
            "missingParams": ["a", "b"],
        }

    def test_absent_url_section_uses_url_status(self):
        ctx = RequestContext(method="GET", params=None)
        res = run_stages(ctx, require_url_params("employeeId"))
        assert res.body["responseStatus"] == "ERR_MISSING_URL_PARAMS"

    def test_query_variant(self):
        res = run_stages(ctx_for(query={"x": "1"}), require_query_params("x", "y"))
        assert res.body == {
            "responseStatus": "ERR_MISSING_QUERY_PARAMS",
            "missingParams": ["y"],
        }


class TestRequireParamValidation:
    def test_every_field_evaluated(self):
        seen = []

        def track(result):
            def check(value):
                seen.append(value)
                return result
            return check

        ctx = ctx_for(body={"a": "1", "b": "2", "c": "3"})
        res = run_stages(ctx, require_body_param_validation({
            "a": track(False),
            "b": track(True),
            "c": track(False),
        }))

        assert seen == ["1", "2", "3"]
        assert res.status_code == 400
        assert res.body == {
            "responseStatus": "ERR_INVALID_BODY_PARAMS",
            "invalidParams": ["a", "c"],
        }

    def test_unlisted_keys_not_validated(self):
        ctx = ctx_for(query={"pageSize": "10", "junk": ""})
        res = run_stages(ctx, require_query_param_validation({"pageSize": strlen_nz}))
        assert res.status_code == 200

    def test_absent_field_validated_as_none(self):
        received = []

        def check(value):
            received.append(value)
            return value is None

        res = run_stages(ctx_for(body={}), require_body_param_validation({"x": check}))
        assert received == [None]
        assert res.status_code == 200

    def test_async_validators_awaited(self):
        async def is_known(value):
            return value == "emp-1"

        ok = run_stages(
            ctx_for(params={"employeeId": "emp-1"}),
            require_url_param_validation({"employeeId": is_known}),
        )
        bad = run_stages(
            ctx_for(params={"employeeId": "emp-2"}),
            require_url_param_validation({"employeeId": is_known}),
        )
        assert ok.status_code == 200
        assert bad.body == {
            "responseStatus": "ERR_INVALID_URL_PARAMS",
            "invalidParams": ["employeeId"],
        }

    def test_absent_body_with_nullable_validators(self):
        res = run_stages(
            ctx_for(body=None),
            require_body_param_validation({"employeeName": allow_nullish(strlen_nz)}),
        )
        assert res.status_code == 200


class TestRunPipeline:
    def test_first_failing_gate_stops_chain(self):
        calls = []

        async def later_gate(ctx, res, next_):
            calls.append("later")
            await next_()

        async def handler(ctx, res):
            calls.append("handler")
            res.json({})

        res = run_stages(
            ctx_for("GET"),
            require_methods("POST"),
            later_gate,
            handler=handler,
        )
        assert res.body == {"responseStatus": "ERR_INVALID_METHOD"}
        assert calls == []

    def test_gates_run_in_order(self):
        order = []

        def gate(name):
            async def stage(ctx, res, next_):
                order.append(name)
                await next_()
            return stage

        run_stages(ctx_for(), gate("one"), gate("two"), gate("three"))
        assert order == ["one", "two", "three"]

    def test_sync_stage_supported(self):
        def sync_gate(ctx, res, next_):
            res.json({"responseStatus": "ERR_NOT_FOUND"}, 404)

        res = run_stages(ctx_for(), sync_gate)
        assert res.status_code == 404

    def test_write_then_next_does_not_reach_handler(self):
        handled = []

        async def sloppy_gate(ctx, res, next_):
            res.error("ERR_INVALID_METHOD")
            await next_()

        async def handler(ctx, res):
            handled.append(True)

        res = run_stages(ctx_for(), sloppy_gate, handler=handler)
        assert res.status_code == 400
        assert handled == []

    def test_next_twice_raises(self):
        async def double(ctx, res, next_):
            await next_()
            await next_()

        with pytest.raises((PipelineError, ResponseAlreadySent)):
            run_stages(ctx_for(), double)

    def test_second_write_raises(self):
        res = ResponseSink()
        res.json({"responseStatus": "SUCCESS"})
        with pytest.raises(ResponseAlreadySent):
            res.json({"responseStatus": "SUCCESS"})


def _build_chain_app():
    app = Flask(__name__)

    @app.route("/items/<itemId>", methods=["POST"])
    @middleware_chain(
        require_methods("POST"),
        require_url_params("itemId"),
        require_body_params("name"),
        require_body_param_validation({"name": strlen_nz}),
    )
    async def create_item(ctx, res):
        res.json({"responseStatus": "SUCCESS", "itemId": ctx.params["itemId"], "name": ctx.body["name"]})

    @app.route("/silent", methods=["GET"])
    @middleware_chain(require_methods("GET"))
    async def silent(ctx, res):
        pass

    return app


class TestMiddlewareChain:
    def test_passes_through_to_handler(self):
        client = _build_chain_app().test_client()
        response = client.post("/items/42", json={"name": "widget"})
        assert response.status_code == 200
        assert response.get_json() == {"responseStatus": "SUCCESS", "itemId": "42", "name": "widget"}

    def test_no_json_body_is_missing_section(self):
        client = _build_chain_app().test_client()
        response = client.post("/items/42", data="not json")
        assert response.status_code == 400
        assert response.get_json() == {
            "responseStatus": "ERR_MISSING_BODY_PARAMS",
            "missingParams": ["name"],
        }

    def test_invalid_value(self):
        client = _build_chain_app().test_client()
        response = client.post("/items/42", json={"name": ""})
        assert response.status_code == 400
        assert response.get_json()["invalidParams"] == ["name"]

    def test_handler_without_response_is_500(self):
        client = _build_chain_app().test_client()
        response = client.get("/silent")
        assert response.status_code == 500
        assert response.get_json() == {"responseStatus": "ERR_INTERNAL_ERROR"}

    def test_view_exposes_stages(self):
        app = _build_chain_app()
        view = app.view_functions["create_item"]
        assert len(view.stages) == 4
        assert view.handler.__name__ == "create_item"
