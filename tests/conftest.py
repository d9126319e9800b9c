"""Shared fixtures. Environment is pinned before saas_value is imported."""

import os

os.environ["MODEL_PROVIDER"] = "mock"
os.environ["RATE_LIMIT_RPM"] = "10000"
os.environ.pop("API_KEY", None)

import pytest

from saas_value.core.cache import counters


class StubModel:
    """Language model double: returns queued replies and records prompts."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def stub_model():
    return StubModel


@pytest.fixture
def core_metrics():
    return {
        "arr": 1_000_000,
        "newBusinessARRGrowthRate": 0.2,
        "expansionARRGrowthRate": 0.1,
        "churnRate": 0.1,
        "netRevenueRetention": 1.05,
        "grossMargin": 0.75,
    }


@pytest.fixture
def scenario_metrics(core_metrics):
    return {
        **core_metrics,
        "customerAcquisitionCost": 5000,
        "ltvToCacRatio": 3.5,
        "salesMarketingSpendPercentage": 0.4,
        "researchDevelopmentSpendPercentage": 0.2,
    }


@pytest.fixture
def valuation_reply():
    return {
        "lowValuation": 3_000_000,
        "highValuation": 6_000_000,
        "averageValuation": 4_500_000,
        "analysis": "## Overview\n\nSolid **growth**.",
    }


@pytest.fixture
def benchmark_reply():
    return {
        "benchmarkAnalysis": "In line with peers.",
        "strengthAreas": ["Healthy margins", "Efficient CAC"],
        "improvementAreas": ["Churn above median"],
    }


@pytest.fixture(autouse=True)
def _reset_rate_limit():
    counters.reset()
    yield
