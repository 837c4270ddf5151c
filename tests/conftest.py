"""
Shared pytest fixtures for the computor test suite.

This module provides:
- Evaluator fixtures with default and exact-display settings
- Conversion helpers for comparing against sympy results
- Cleanup of the ``computor`` logger configured by the CLI
"""

import logging

import pytest

from computor.core.config import Settings
from computor.evaluator import Environment, Evaluator
from computor.math import Matrix, Rational


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the process environment."""
    return Settings(
        LOG_LEVEL="WARNING",
        LOG_FORMAT="text",
        LOG_FILE=None,
        DECIMAL_PLACES=10,
        SQRT_DECIMAL_PLACES=10,
        DISPLAY_DECIMALS=True,
    )


@pytest.fixture
def evaluator(settings: Settings) -> Evaluator:
    """Fresh evaluator with an empty environment."""
    return Evaluator(Environment(), settings)


@pytest.fixture
def exact_evaluator(settings: Settings) -> Evaluator:
    """Evaluator that always renders rationals as fractions."""
    return Evaluator(Environment(), settings.model_copy(update={"DISPLAY_DECIMALS": False}))


@pytest.fixture
def from_sympy():
    """Convert sympy numbers and matrices to computor values."""
    import sympy

    def _convert(value):
        if isinstance(value, sympy.MatrixBase):
            return Matrix([[_convert(cell) for cell in row] for row in value.tolist()])
        rational = sympy.Rational(value)
        return Rational(int(rational.p), int(rational.q))

    return _convert


@pytest.fixture(autouse=True)
def reset_computor_logger():
    """Undo handler changes made by setup_logging during a test."""
    yield
    logger = logging.getLogger("computor")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


pytestmark = [
    pytest.mark.filterwarnings("ignore::DeprecationWarning"),
]
