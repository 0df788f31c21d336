"""Pytest configuration and fixtures."""

import pytest

from tokenlaw.core.models import (
    Airdrop,
    AllocationPolicy,
    FixedHurdleMode,
    FixedSupply,
    InflationConfig,
    OracleMode,
    PercentageDistribution,
    VestingSchedule,
)
from tokenlaw.engine import InflationRebalancer, ManualClock
from tokenlaw.persistence import MemoryStore

ORACLE = "oracle.near"


def make_oracle_config(**overrides) -> InflationConfig:
    """Oracle-mode config with a short cooldown and age limit."""
    values = dict(
        mode=OracleMode(oracle_account=ORACLE),
        measurement_window_days=365,
        min_real_return_bps=200,
        rebalance_cooldown_seconds=86_400,
        max_oracle_age_seconds=100,
        safety_cap_bps=10_000,
        growth_cap_bps=3_000,
        liquidity_cap_bps=2_000,
        max_rebalance_step_bps=None,
    )
    values.update(overrides)
    return InflationConfig(**values)


def make_hurdle_config(hurdle_bps: int = 300, **overrides) -> InflationConfig:
    values = dict(
        mode=FixedHurdleMode(hurdle_bps_annual=hurdle_bps),
        measurement_window_days=365,
        min_real_return_bps=0,
        rebalance_cooldown_seconds=3_600,
        max_oracle_age_seconds=0,
        safety_cap_bps=10_000,
        growth_cap_bps=5_000,
        liquidity_cap_bps=10_000,
        max_rebalance_step_bps=250,
    )
    values.update(overrides)
    return InflationConfig(**values)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=1_000)


@pytest.fixture
def events() -> list:
    """Collects events forwarded to a rebalancer's sink."""
    return []


@pytest.fixture
def oracle_rebalancer(store, clock, events) -> InflationRebalancer:
    """Initialized Oracle-mode rebalancer."""
    rebalancer = InflationRebalancer(store, namespace="test", clock=clock, event_sink=events.append)
    rebalancer.init(make_oracle_config())
    return rebalancer


@pytest.fixture
def hurdle_rebalancer(store, clock) -> InflationRebalancer:
    """Initialized FixedHurdle-mode rebalancer."""
    rebalancer = InflationRebalancer(store, namespace="hurdle", clock=clock)
    rebalancer.init(make_hurdle_config())
    return rebalancer


@pytest.fixture
def scenario_policy() -> AllocationPolicy:
    """Supply 1,000,000 with airdrop 300, vesting 400 and 5000 bps by percentage."""
    return AllocationPolicy(
        fixed_supply=FixedSupply(amount=1_000_000),
        airdrop=Airdrop(recipients=("alice.near", "bob.near", "carol.near"), amount=100),
        vesting_schedule=VestingSchedule(
            cliff_seconds=86_400,
            duration_seconds=31_536_000,
            recipients=("team.near", "advisor.near"),
            amount=200,
        ),
        percentage_distributions=(
            PercentageDistribution(percentage_bps=3_000, recipients=("dao.near",)),
            PercentageDistribution(percentage_bps=2_000, recipients=("treasury.near", "alice.near")),
        ),
    )


@pytest.fixture
def policy_document() -> dict:
    """Wire-format policy document with numeric strings."""
    return {
        "fixed_supply": {"amount": "1000000000000000000000000000"},
        "burn_cap": {"cap": "1000000000000000000000000"},
        "time_lock": {"duration": "2592000"},
        "airdrop": {"recipients": ["alice.near", "bob.near"], "amount": "1000000000000000000"},
        "vesting_schedule": {
            "cliff": "31536000",
            "duration": "126144000",
            "recipients": ["team.near"],
            "amount": "150000000000000000000000000",
        },
        "liquidity_bootstrap": {"pair": "pool.ref-finance.near", "amount": "50000000000000000000000000"},
        "percentage_distributions": [
            {"percentage": "2500", "recipients": ["dao.near", "grants.near"]},
        ],
    }


@pytest.fixture
def oracle_config_factory():
    return make_oracle_config


@pytest.fixture
def hurdle_config_factory():
    return make_hurdle_config
