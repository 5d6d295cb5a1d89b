import logging
from datetime import datetime

from agla_error.common.options import (
    RESERVED_OPTION_KEYS,
    NormalizedOptions,
    is_structured_options,
    normalize_options,
)


def test_none_leaves_every_field_unset():
    assert normalize_options(None) == NormalizedOptions()


def test_structured_options_are_extracted_independently():
    context = {"a": 1}
    normalized = normalize_options({"code": "C1", "severity": "error", "context": context})

    assert normalized.code == "C1"
    assert normalized.severity == "error"
    assert normalized.context is context
    assert normalized.timestamp is None
    assert normalized.cause is None


def test_any_single_reserved_key_marks_options_as_structured():
    for key in RESERVED_OPTION_KEYS:
        assert is_structured_options({key: "x"}), key


def test_bare_mapping_becomes_legacy_context(caplog):
    legacy = {"userId": "123", "operation": "legacy"}

    with caplog.at_level(logging.DEBUG, logger="agla_error.common.options"):
        normalized = normalize_options(legacy)

    assert normalized.context is legacy
    assert normalized.code is None
    assert normalized.severity is None
    assert normalized.timestamp is None
    assert "legacy context" in caplog.text


def test_empty_mapping_is_taken_as_context():
    empty = {}
    assert normalize_options(empty).context is empty


def test_non_mapping_options_degrade_to_context():
    assert normalize_options("oops").context == "oops"
    assert normalize_options(["code"]).context == ["code"]


def test_values_are_stored_without_validation():
    bad_date = "not-a-date"
    normalized = normalize_options({"severity": "critical", "timestamp": bad_date})

    assert normalized.severity == "critical"
    assert normalized.timestamp is bad_date


def test_reserved_key_inside_data_is_read_as_structured_options():
    # Known trade-off of the key-presence heuristic.
    payload = {"severity": "high", "ticket": 7}
    normalized = normalize_options(payload)

    assert normalized.severity == "high"
    assert normalized.context is None


def test_explicit_falsy_values_are_kept():
    normalized = normalize_options({"code": "", "context": {}, "timestamp": datetime(1970, 1, 1)})
    assert normalized.code == ""
    assert normalized.context == {}
