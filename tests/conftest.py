"""
Shared fixtures for the sentinel test suite.

Components get explicit empty credentials so a developer's .env never turns on
real Telegram or Claude calls during a test run.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from agents.sentinel.models.schemas import AdvisoryResult
from agents.sentinel.services.advisor import AnomalyAdvisor
from agents.sentinel.services.chain import ChainClient
from agents.sentinel.services.monitor import BlockMonitor
from agents.sentinel.services.notifier import Notifier
from helpers import make_block, make_receipt


@pytest.fixture
def chain():
    client = MagicMock(spec=ChainClient)
    client.rpc_url = "http://rpc.test"
    client.latest_block_id = AsyncMock(return_value="0x10")
    client.block_by_id = AsyncMock(return_value=make_block("0x10", []))
    client.receipt_by_hash = AsyncMock(return_value=make_receipt())
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def notifier():
    n = MagicMock(spec=Notifier)
    n.enabled = True
    n.configured = True
    n.send_alert = AsyncMock(return_value=True)
    n.send_status = AsyncMock(return_value=True)
    return n


@pytest.fixture
def advisor():
    a = MagicMock(spec=AnomalyAdvisor)
    a.enabled = False
    a.assess = AsyncMock(
        return_value=AdvisoryResult(explanation="not available", advisor_enabled=False, status="disabled")
    )
    return a


@pytest.fixture
def monitor(chain, notifier, advisor):
    return BlockMonitor(
        chain=chain,
        notifier=notifier,
        advisor=advisor,
        threshold_value=1000.0,
        threshold_fee=0.1,
        anomaly_confidence=60,
    )
