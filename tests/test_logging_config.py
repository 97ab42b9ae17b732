# tests/test_logging_config.py
"""Stdlib logging records routed into loguru keep their real call site."""

import logging

from loguru import logger

from app.core.logging_config import InterceptHandler


def _create_order(std_logger):
    std_logger.warning("Order %s created", "P1A2B3C4D")


def test_intercepted_record_points_at_calling_function():
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    std_logger = logging.getLogger("order_repository_intercept")
    std_logger.handlers = [InterceptHandler()]
    std_logger.propagate = False
    std_logger.setLevel(logging.DEBUG)
    try:
        _create_order(std_logger)
    finally:
        logger.remove(sink_id)
        std_logger.handlers = []

    record = records[-1]
    assert record["function"] == "_create_order"
    assert record["name"] == __name__
    assert record["message"] == "Order P1A2B3C4D created"
    assert record["level"].name == "WARNING"
