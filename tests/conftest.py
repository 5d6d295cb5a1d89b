from datetime import datetime, timezone

import pytest

from agla_error.common.errors import AglaError
from agla_error.common.severity import ErrorSeverity
from error_types import SampleError


@pytest.fixture
def fixed_timestamp():
    return datetime(2025, 8, 29, 21, 42, 0, tzinfo=timezone.utc)


@pytest.fixture
def full_error(fixed_timestamp):
    return SampleError(
        "USER_ACTION_ERROR",
        "Failed to process action",
        {
            "code": "UA_001",
            "severity": ErrorSeverity.ERROR,
            "timestamp": fixed_timestamp,
            "context": {"user": "alice", "action": "create-document"},
        },
    )


@pytest.fixture(autouse=True)
def restore_serialization_config():
    # configure_serialization() mutates class state; keep tests isolated.
    original = AglaError.serialization
    yield
    AglaError.serialization = original
    if "serialization" in vars(SampleError):
        del SampleError.serialization
