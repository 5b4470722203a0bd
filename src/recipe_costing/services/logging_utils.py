"""Structured logging helpers for the costing services.

Every service module logs through a logger named
``recipe_costing.services.<module>`` and reports each operation as
``"<operation>: <outcome>"`` with its context attached as LogRecord
attributes, so handlers can filter on ``record.operation`` or
``record.recipe_id`` without parsing messages.

Usage:
    from recipe_costing.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="check_recipe_units",
        outcome="unit_mismatch",
        level=logging.WARNING,
        recipe_id=45,
        mismatched_items=["Ham Leg"],
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "recipe_costing.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Logger for a service module.

    Args:
        name: Module name, usually __name__; only the last dotted segment is kept

    Returns:
        Logger named 'recipe_costing.services.<segment>'
    """
    return logging.getLogger(f"{LOGGER_PREFIX}.{name.rsplit('.', 1)[-1]}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log one service operation with structured context.

    Args:
        logger: Logger to write to
        operation: Operation name (e.g., "calculate_recipe_cost")
        outcome: Result (e.g., "success", "unit_mismatch", "error")
        level: Log level; DEBUG for per-line engine events
        **context: Extra attributes for the record (ids, totals, unit names)
    """
    logger.log(
        level,
        f"{operation}: {outcome}",
        extra={"operation": operation, "outcome": outcome, **context},
    )
