"""Tests for logging setup and secret masking."""

import logging

import pytest

from common.logging_config import SensitiveDataFilter, get_logger, setup_logging


@pytest.fixture
def fresh_logger():
    name = "test-component"
    logger = logging.getLogger(name)
    logger.handlers.clear()
    yield name
    logger.handlers.clear()
    logger.propagate = True


def make_record(msg, args=()):
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


class TestSensitiveDataFilter:

    def test_masks_ticket_in_query(self):
        masked = SensitiveDataFilter.mask("PUT /upload/storage?extension=pdf&ticket=abc123")
        assert "abc123" not in masked
        assert "extension=pdf" in masked

    def test_masks_json_token(self):
        masked = SensitiveDataFilter.mask('{"token": "s3cr3t"}')
        assert "s3cr3t" not in masked

    def test_masks_bearer(self):
        masked = SensitiveDataFilter.mask("Authorization header: Bearer eyJhbGciOi")
        assert "eyJhbGciOi" not in masked

    def test_leaves_plain_text(self):
        assert SensitiveDataFilter.mask("Completed upload of report.pdf") == "Completed upload of report.pdf"

    def test_filter_masks_args(self):
        record = make_record("issued %s", ("ticket=xyz",))

        assert SensitiveDataFilter().filter(record)
        assert "xyz" not in record.getMessage()


class TestSetupLogging:

    def test_configures_single_handler(self, fresh_logger):
        logger = setup_logging(fresh_logger, log_level="DEBUG")
        setup_logging(fresh_logger, log_level="DEBUG")

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_handler_carries_filter(self, fresh_logger):
        logger = setup_logging(fresh_logger)
        assert any(isinstance(f, SensitiveDataFilter) for f in logger.handlers[0].filters)

    def test_unknown_level_defaults_to_info(self, fresh_logger):
        assert setup_logging(fresh_logger, log_level="chatty").level == logging.INFO

    def test_correlation_id_in_format(self, fresh_logger):
        logger = setup_logging(fresh_logger, correlation_id="req-42")
        assert "req-42" in logger.handlers[0].formatter._fmt

    def test_get_logger(self):
        assert get_logger("gateway.tickets") is logging.getLogger("gateway.tickets")
