"""Unit tests for policy, inflation and event models."""

import json

import pytest

from tokenlaw.core.constants import U128_MAX
from tokenlaw.core.errors import ConfigError, PolicyFormatError
from tokenlaw.core.models import (
    AllocationPolicy,
    FixedHurdleMode,
    IndexPosted,
    IndexSample,
    InflationConfig,
    InflationState,
    InflationStatus,
    OracleMode,
    Rebalanced,
    StatusUpdated,
)
from tokenlaw.policy import validate_policy


class TestPolicyDocument:
    """Tests for AllocationPolicy.from_dict / to_dict."""

    def test_parses_numeric_strings(self, policy_document):
        policy = AllocationPolicy.from_dict(policy_document)

        assert policy.supply == 10**27
        assert policy.burn_cap.cap == 10**24
        assert policy.time_lock.duration_seconds == 2_592_000
        assert policy.airdrop.recipients == ("alice.near", "bob.near")
        assert policy.vesting_schedule.cliff_seconds == 31_536_000
        assert policy.liquidity_bootstrap.destination == "pool.ref-finance.near"
        assert policy.percentage_distributions[0].percentage_bps == 2_500

    def test_parsed_document_validates(self, policy_document):
        summary = validate_policy(AllocationPolicy.from_dict(policy_document))
        assert summary.percentage_reserved == 25 * 10**25

    def test_serializes_amounts_as_strings(self, policy_document):
        data = AllocationPolicy.from_dict(policy_document).to_dict()

        assert data["fixed_supply"] == {"amount": "1000000000000000000000000000"}
        assert data["liquidity_bootstrap"]["pair"] == "pool.ref-finance.near"
        assert AllocationPolicy.from_dict(data) == AllocationPolicy.from_dict(policy_document)

    def test_accepts_plain_integers_and_aliases(self):
        policy = AllocationPolicy.from_dict({
            "fixed_supply": {"amount": 1000},
            "time_lock": {"duration_seconds": 60},
            "liquidity_bootstrap": {"destination": "pool.near", "amount": 10},
            "percentage_distributions": [{"percentage_bps": 100, "recipients": ["a"]}],
        })

        assert policy.time_lock.duration_seconds == 60
        assert policy.liquidity_bootstrap.destination == "pool.near"
        assert policy.percentage_distributions[0].percentage_bps == 100

    def test_optional_modules_absent(self):
        policy = AllocationPolicy.from_dict({"fixed_supply": {"amount": "1"}})

        assert policy.airdrop is None
        assert policy.percentage_distributions == ()

    def test_keeps_duplicate_recipients_for_validation(self):
        """Parsing must not dedupe; the validator reports duplicates."""
        policy = AllocationPolicy.from_dict({
            "fixed_supply": {"amount": "10"},
            "airdrop": {"recipients": ["a", "a"], "amount": "1"},
        })
        assert policy.airdrop.recipients == ("a", "a")

    @pytest.mark.parametrize(
        "document",
        [
            {},
            {"fixed_supply": {}},
            {"fixed_supply": {"amount": "-5"}},
            {"fixed_supply": {"amount": "1.5"}},
            {"fixed_supply": {"amount": True}},
            {"fixed_supply": {"amount": str(U128_MAX + 1)}},
            {"fixed_supply": {"amount": "1"}, "airdrop": {"recipients": "a", "amount": "1"}},
            {"fixed_supply": {"amount": "1"}, "airdrop": {"recipients": [7], "amount": "1"}},
            {"fixed_supply": {"amount": "1"}, "percentage_distributions": {}},
            {"fixed_supply": {"amount": "1"}, "liquidity_bootstrap": {"amount": "1"}},
        ],
    )
    def test_malformed_documents(self, document):
        with pytest.raises(PolicyFormatError):
            AllocationPolicy.from_dict(document)

    def test_u128_max_accepted(self):
        policy = AllocationPolicy.from_dict({"fixed_supply": {"amount": str(U128_MAX)}})
        assert policy.supply == U128_MAX


class TestInflationConfig:
    """Tests for InflationConfig wire parsing."""

    def oracle_document(self, **overrides):
        data = {
            "mode": "Oracle",
            "oracle_account": "oracle.near",
            "measurement_window_days": 365,
            "min_real_return_bps": 200,
            "rebalance_cooldown_sec": 86_400,
            "max_oracle_age_sec": 3_888_000,
            "safety_cap_bps": 10_000,
            "growth_cap_bps": 4_000,
            "liquidity_cap_bps": 2_000,
        }
        data.update(overrides)
        return data

    def test_oracle_mode(self):
        config = InflationConfig.from_dict(self.oracle_document())

        assert config.mode == OracleMode(oracle_account="oracle.near")
        assert config.oracle_account == "oracle.near"
        assert config.fixed_hurdle_bps_annual is None
        assert config.rebalance_step_bps == 100

    def test_fixed_hurdle_mode(self):
        config = InflationConfig.from_dict(
            self.oracle_document(mode="FixedHurdle", oracle_account=None, fixed_hurdle_bps_annual=300)
        )

        assert config.mode == FixedHurdleMode(hurdle_bps_annual=300)
        assert not config.is_oracle
        assert config.oracle_account is None

    def test_round_trip_keeps_flat_layout(self):
        data = self.oracle_document(max_rebalance_step_bps=50)
        config = InflationConfig.from_dict(data)

        assert config.to_dict() == {**data, "fixed_hurdle_bps_annual": None}
        assert config.rebalance_step_bps == 50

    @pytest.mark.parametrize(
        "overrides",
        [
            {"oracle_account": None},
            {"fixed_hurdle_bps_annual": 300},
            {"mode": "FixedHurdle"},
            {"mode": "FixedHurdle", "oracle_account": None},
            {"mode": "Adaptive"},
        ],
    )
    def test_mode_pairing_enforced(self, overrides):
        with pytest.raises(ConfigError):
            InflationConfig.from_dict(self.oracle_document(**overrides))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"safety_cap_bps": 10_001},
            {"growth_cap_bps": 20_000},
            {"liquidity_cap_bps": -1},
            {"measurement_window_days": 70_000},
            {"min_real_return_bps": 2**31},
            {"rebalance_cooldown_sec": "86400"},
            {"max_rebalance_step_bps": -1},
        ],
    )
    def test_out_of_range_fields(self, overrides):
        with pytest.raises(ConfigError):
            InflationConfig.from_dict(self.oracle_document(**overrides))

    def test_missing_field(self):
        data = self.oracle_document()
        del data["max_oracle_age_sec"]
        with pytest.raises(ConfigError, match="max_oracle_age_sec"):
            InflationConfig.from_dict(data)


class TestInflationState:
    def test_default_state(self):
        state = InflationState()

        assert state.last_index is None
        assert state.status == InflationStatus.HEALTHY
        assert (state.safety_weight_bps, state.growth_weight_bps, state.liquidity_weight_bps) == (
            10_000,
            0,
            0,
        )
        assert state.total_weight_bps == 10_000
        assert state.last_rebalance_at_seconds == 0

    def test_round_trip(self):
        state = InflationState(
            last_index=IndexSample("US_CPI_U", "2026-01", 310, 1_700_000_000),
            last_rebalance_at_seconds=1_700_000_500,
            real_return_score_bps=-510,
            status=InflationStatus.BEHIND,
            safety_weight_bps=9_900,
            growth_weight_bps=100,
        )
        assert InflationState.from_dict(state.to_dict()) == state


class TestEvents:
    """Event payloads are an audit contract."""

    def test_index_posted(self):
        event = IndexPosted(index_id="US_CPI_U", period="2026-01", value_bps=310, posted_at_sec=42)
        assert event.to_dict() == {
            "event": "OIM_INDEX_POSTED",
            "index_id": "US_CPI_U",
            "period": "2026-01",
            "value_bps": 310,
            "posted_at_sec": 42,
        }

    def test_status_updated(self):
        event = StatusUpdated(status=InflationStatus.ORACLE_STALE, real_return_score_bps=0, at_sec=7)
        assert event.to_dict() == {
            "event": "OIM_STATUS_UPDATED",
            "status": "OracleStale",
            "real_return_score_bps": 0,
            "at_sec": 7,
        }

    def test_rebalanced_json_line(self):
        event = Rebalanced(from_safety_bps=100, to_growth_bps=100, at_sec=9)
        line = event.to_json()

        assert " " not in line
        assert json.loads(line) == {
            "event": "OIM_REBALANCED",
            "from_safety_bps": 100,
            "to_growth_bps": 100,
            "at_sec": 9,
        }
