"""Audit helper for emitting structured events for project and tree mutations."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from wbs_engines.common.identity import RequestContext
from wbs_engines.config import runtime_config

logger = logging.getLogger(__name__)
audit_log = logging.getLogger("wbs_engines.audit")


class AuditEvent(BaseModel):
    event_id: str = Field(default_factory=lambda: uuid4().hex)
    action: str
    tenant_id: str = Field(..., pattern=r"^t_[a-z0-9_-]+$")
    env: str
    actor_type: str
    user_id: Optional[str] = None
    request_id: Optional[str] = None
    project_id: Optional[str] = None
    task_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = Field(default_factory=dict)


AuditSink = Callable[[AuditEvent], Dict[str, Any]]


def log_audit_event(event: AuditEvent) -> Dict[str, Any]:
    """Default sink: one JSON line on the wbs_engines.audit logger."""
    audit_log.info(event.model_dump_json())
    return {"status": "accepted", "event_id": event.event_id}


_audit_sink: AuditSink = log_audit_event


def set_audit_logger(sink: AuditSink) -> None:
    global _audit_sink
    _audit_sink = sink


def reset_audit_logger() -> None:
    set_audit_logger(log_audit_event)


def emit_audit_event(
    ctx: RequestContext,
    action: str,
    project_id: Optional[str] = None,
    task_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditEvent:
    event = AuditEvent(
        action=action,
        tenant_id=ctx.tenant_id,
        env=ctx.env or runtime_config.get_env(),
        actor_type="human" if ctx.user_id else "system",
        user_id=ctx.user_id,
        request_id=ctx.request_id,
        project_id=project_id,
        task_id=task_id,
        metadata=metadata or {},
    )
    result = _audit_sink(event)
    if not result or result.get("status") != "accepted":
        detail = (result or {}).get("error", "audit persistence failed")
        if runtime_config.audit_strict():
            raise RuntimeError(detail)
        logger.warning("audit persistence failed: %s", detail)
    return event
