"""
Pytest configuration and fixtures.
"""

import logging
from typing import List

import pytest

from citecheck.models import CitationRecord, StrictnessLevel, ValidatorConfig
from tests.fixtures.records import (
    make_incomplete_book,
    make_journal_articles,
    make_valid_book,
)


@pytest.fixture
def default_config() -> ValidatorConfig:
    """Standard strictness with every exploration feature enabled."""
    return ValidatorConfig()


@pytest.fixture
def strict_config() -> ValidatorConfig:
    return ValidatorConfig.from_strictness(StrictnessLevel.STRICT)


@pytest.fixture
def lenient_config() -> ValidatorConfig:
    return ValidatorConfig.from_strictness(StrictnessLevel.LENIENT)


@pytest.fixture
def valid_book() -> CitationRecord:
    return make_valid_book()


@pytest.fixture
def incomplete_book() -> CitationRecord:
    return make_incomplete_book()


@pytest.fixture
def journal_articles() -> List[CitationRecord]:
    return make_journal_articles(10)


@pytest.fixture(autouse=True)
def reset_citecheck_logger():
    """Drop handlers added by setup_logging so tests do not leak into each other."""
    yield
    logger = logging.getLogger("citecheck")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
