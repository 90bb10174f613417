import sys
from pathlib import Path

import pytest

# Ensure repo root on sys.path for imports from anywhere in tests tree.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wbs_engines.logging.audit import reset_audit_logger, set_audit_logger  # noqa: E402


@pytest.fixture(autouse=True)
def _default_audit_sink():
    yield
    reset_audit_logger()


@pytest.fixture
def audit_events():
    """Capture audit events instead of logging them."""
    events = []

    def sink(event):
        events.append(event)
        return {"status": "accepted", "event_id": event.event_id}

    set_audit_logger(sink)
    return events
