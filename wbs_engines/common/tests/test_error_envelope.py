"""
Tests for domain error translation and request context.
"""

import pytest
from fastapi import HTTPException

from wbs_engines.common.error_envelope import build_error_envelope, wbs_errors
from wbs_engines.common.errors import (
    DuplicateResource,
    InvalidMutation,
    ProjectLimitReached,
    ProjectNotFound,
    ResourceNotFound,
    TaskNotFound,
)
from wbs_engines.common.identity import RequestContext


def test_build_envelope():
    envelope = build_error_envelope("wbs_task.not_found", "Task x not found", 404, "wbs_task")
    assert envelope.model_dump() == {
        "error": {
            "code": "wbs_task.not_found",
            "message": "Task x not found",
            "http_status": 404,
            "resource_kind": "wbs_task",
            "details": {},
        }
    }


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (ProjectNotFound("p1"), 404, "wbs_project.not_found"),
        (TaskNotFound("t1"), 404, "wbs_task.not_found"),
        (ResourceNotFound("r1"), 404, "resource.not_found"),
        (InvalidMutation("bad"), 422, "wbs_task.invalid_mutation"),
        (DuplicateResource("dup"), 409, "resource.duplicate"),
        (ProjectLimitReached("full"), 409, "wbs_project.limit_reached"),
    ],
)
def test_domain_errors_become_http(exc, status, code):
    with pytest.raises(HTTPException) as info:
        with wbs_errors():
            raise exc
    assert info.value.status_code == status
    assert info.value.detail["error"]["code"] == code
    assert info.value.detail["error"]["message"] == str(exc)


def test_not_found_message_is_plain():
    assert str(TaskNotFound("t1")) == "Task t1 not found"


def test_other_errors_pass_through():
    with pytest.raises(RuntimeError):
        with wbs_errors():
            raise RuntimeError("boom")


class TestRequestContext:

    def test_from_headers(self):
        ctx = RequestContext.from_headers({"X-Tenant-Id": "t_acme", "X-Env": "PROD", "X-User-Id": "u1"})
        assert ctx.scope() == ("t_acme", "prod")
        assert ctx.user_id == "u1"
        assert ctx.request_id

    def test_env_defaults_from_config(self, monkeypatch):
        monkeypatch.setenv("ENV", "stage")
        assert RequestContext(tenant_id="t_acme").env == "stage"

    @pytest.mark.parametrize("tenant", ["", "acme", "t_ACME", "t_a b"])
    def test_invalid_tenant(self, tenant):
        with pytest.raises(ValueError):
            RequestContext(tenant_id=tenant)

    def test_missing_tenant_header(self):
        with pytest.raises(ValueError):
            RequestContext.from_headers({"X-Env": "dev"})
