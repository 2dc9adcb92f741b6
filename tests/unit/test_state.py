"""Tests for HandlerState and the write-once finalization gate."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

from starlette.responses import Response

from fastapi_route_handler.routes import Env, RequestData
from fastapi_route_handler.state import HandlerState, RunNext


class TestHandlerStateInitial:
    def test_defaults(self, make_request: Any, root_env: Env) -> None:
        data = RequestData(request=make_request())
        state = HandlerState.initial(root_env, data)
        assert state.pending_status == 200
        assert state.pending_headers == []
        assert state.cached_body is None
        assert state.finalized is None
        assert state.is_finalized is False
        assert state.state == {}

    def test_copies_env_handles(self, make_request: Any, nested_env: Env) -> None:
        data = RequestData(request=make_request())
        state = HandlerState.initial(nested_env, data)
        assert state.master is nested_env.master
        assert state.sub is nested_env.sub
        assert state.master_routes is nested_env.master_routes
        assert state.sub_routes is nested_env.sub_routes
        assert state.to_master is nested_env.to_master
        assert state.request_data is data

    def test_state_not_shared_between_instances(
        self, make_request: Any, root_env: Env
    ) -> None:
        s1 = HandlerState.initial(root_env, RequestData(request=make_request()))
        s2 = HandlerState.initial(root_env, RequestData(request=make_request()))
        s1.pending_headers.append(("X-A", "1"))
        s1.state["x"] = 1
        assert s2.pending_headers == []
        assert "x" not in s2.state


class TestFinalizeWith:
    def test_first_call_wins(self, make_request: Any, root_env: Env) -> None:
        state = HandlerState.initial(root_env, RequestData(request=make_request()))
        first = Response(b"first")
        second = Response(b"second")
        assert state.finalize_with(lambda: first) is True
        assert state.finalize_with(lambda: second) is False
        assert state.finalized is first

    def test_producer_not_called_once_closed(
        self, make_request: Any, root_env: Env
    ) -> None:
        state = HandlerState.initial(root_env, RequestData(request=make_request()))
        state.finalize_with(RunNext)
        producer = Mock(return_value=Response(b"late"))
        state.finalize_with(producer)
        producer.assert_not_called()
        assert isinstance(state.finalized, RunNext)

    def test_run_next_repr(self) -> None:
        assert repr(RunNext()) == "RunNext()"
