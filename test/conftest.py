"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads settings
- A Settings fixture with explicit fee and sandbox values

Architecture:
- Unit tests (test/**/unit/): mocked unit of work, no database
- Integration tests (test/**/integration/): temporary SQLite database per test
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks are built at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)
    os.environ.setdefault('DEPLOY_ENV', 'test')

    # Never reach a real database or gateway from the test suite
    os.environ['DATABASE_URL_ASYNC'] = 'sqlite+aiosqlite:///:memory:'
    os.environ['PAYSTACK_BASE_URL'] = 'https://paystack.test'
    os.environ['PAYMENT_TEST_MODE_ENABLED'] = 'true'


_early_setup_test_environment()

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from src.platform.config.core_setting import Settings  # noqa: E402


@pytest.fixture
def config() -> Settings:
    return Settings(
        PLATFORM_FEE_RATE=Decimal('0.15'),
        PAYMENT_TEST_MODE_ENABLED=True,
        PAYMENT_TEST_MAX_AMOUNT=Decimal('5'),
        TEST_TICKET_DEFAULT_AMOUNT=Decimal('1500'),
        PAYMENT_CURRENCY='ZAR',
        PAYMENT_CALLBACK_BASE_URL='http://localhost:5000',
        PAYSTACK_BASE_URL='https://paystack.test',
    )
