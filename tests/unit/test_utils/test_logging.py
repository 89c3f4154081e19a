"""Tests for structured logging helpers."""

import logging

import pytest
from buyer_crm.utils import logging as log_utils
from buyer_crm.utils.logging_config import LoggingConfig


@pytest.mark.unit
def test_correlation_context_restores_previous_id():
    log_utils.set_correlation_id("outer")
    
    with log_utils.correlation_context("inner") as correlation_id:
        assert correlation_id == "inner"
        assert log_utils.get_correlation_id() == "inner"
    
    assert log_utils.get_correlation_id() == "outer"
    log_utils.set_correlation_id(None)


@pytest.mark.unit
def test_correlation_context_generates_id():
    with log_utils.correlation_context() as correlation_id:
        assert correlation_id.startswith("req_")


@pytest.mark.unit
def test_mask_sensitive_data(monkeypatch):
    monkeypatch.setattr(LoggingConfig, "LOG_MASK_SENSITIVE", True)
    
    masked = log_utils.mask_sensitive_data(
        "lead jane.doe@example.com phone +1 (555) 012-3456 token=abcdefghijklmnopqrstuvwxyz"
    )
    
    assert "jane.doe@example.com" not in masked
    assert "[REDACTED_EMAIL]" in masked
    assert "[REDACTED_PHONE]" in masked
    assert "abcdefghijklmnopqrstuvwxyz" not in masked


@pytest.mark.unit
def test_masking_disabled(monkeypatch):
    monkeypatch.setattr(LoggingConfig, "LOG_MASK_SENSITIVE", False)
    
    assert log_utils.mask_sensitive_data("jane@example.com") == "jane@example.com"
    assert log_utils.mask_user_id("11111111-1111-1111-1111-111111111111") == "11111111-1111-1111-1111-111111111111"


@pytest.mark.unit
def test_mask_user_id_is_stable(monkeypatch):
    monkeypatch.setattr(LoggingConfig, "LOG_MASK_SENSITIVE", True)
    user_id = "11111111-1111-1111-1111-111111111111"
    
    masked = log_utils.mask_user_id(user_id)
    
    assert masked.startswith("1111...")
    assert masked == log_utils.mask_user_id(user_id)
    assert log_utils.mask_user_id(None) is None


@pytest.mark.unit
def test_structured_logger_attaches_fields(caplog):
    logger = log_utils.get_structured_logger("buyer_crm.test")
    
    with caplog.at_level(logging.INFO, logger="buyer_crm.test"):
        with log_utils.correlation_context("req_fixed"):
            logger.info("Lead created", lead_id="abc")
    
    record = caplog.records[-1]
    assert record.lead_id == "abc"
    assert record.correlation_id == "req_fixed"


@pytest.mark.unit
def test_log_timing_reports_slow_operations(caplog, monkeypatch):
    monkeypatch.setattr(LoggingConfig, "LOG_SLOW_OPERATION_THRESHOLD_MS", -1)
    logger = log_utils.get_structured_logger("buyer_crm.test")
    
    with caplog.at_level(logging.DEBUG, logger="buyer_crm.test"):
        with log_utils.log_timing("csv_import", logger=logger, rows=2):
            pass
    
    messages = [record.getMessage() for record in caplog.records]
    assert "Completed csv_import" in messages
    assert "Slow operation detected: csv_import" in messages
    assert caplog.records[-1].rows == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_timed_wraps_coroutines(caplog):
    @log_utils.timed("export")
    async def work():
        return 42
    
    with caplog.at_level(logging.INFO):
        assert await work() == 42
    
    assert any(record.getMessage() == "Completed export" for record in caplog.records)
