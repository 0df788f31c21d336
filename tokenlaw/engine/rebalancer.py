"""Oracle/hurdle-driven treasury weight rebalancer."""

import logging
from typing import Callable, List, Optional, Tuple

from tokenlaw.core.checked import in_range, saturating_sub
from tokenlaw.core.constants import (
    BPS_DENOMINATOR,
    I32_MAX,
    I32_MIN,
    U32_MAX,
    U64_MAX,
    VAULT_GROWTH_BPS,
)
from tokenlaw.core.errors import (
    ArithmeticOverflow,
    AuthorizationError,
    ConfigError,
    CooldownActiveError,
    InputRangeError,
    NotInitializedError,
)
from tokenlaw.core.models import (
    IndexPosted,
    IndexSample,
    InflationConfig,
    InflationState,
    InflationStatus,
    OracleMode,
    Rebalanced,
    RebalancerEvent,
    StatusUpdated,
    default_state,
)
from tokenlaw.persistence import KeyValueStore, StorageKeys

from .clock import Clock, system_clock

logger = logging.getLogger(__name__)

EventSink = Callable[[RebalancerEvent], None]


class InflationRebalancer:
    """
    Persisted config + state pair driving the safety/growth/liquidity weights.

    Status machine:
    - HEALTHY: real return score >= 0, weights left alone
    - BEHIND: score < 0, shift a bounded step from safety to growth
    - ORACLE_STALE: oracle sample missing or too old, weights frozen

    Every operation reads both records, derives a new state locally and
    writes it back once on the success path. Failures write nothing.
    Events are returned to the caller (and forwarded to the optional sink)
    only after the write commits.
    """

    def __init__(
        self,
        store: KeyValueStore,
        namespace: str = "oim",
        clock: Optional[Clock] = None,
        event_sink: Optional[EventSink] = None,
    ):
        """
        Args:
            store: Host key-value storage
            namespace: Key prefix for this instance's config/state records
            clock: Seconds source used when `now` is not passed explicitly
            event_sink: Receives each committed event
        """
        self.store = store
        self.namespace = namespace
        self.clock = clock or system_clock
        self.event_sink = event_sink

    @property
    def _lock(self):
        return self.store.lock(self.namespace)

    @property
    def _config_key(self) -> str:
        return StorageKeys.config(self.namespace)

    @property
    def _state_key(self) -> str:
        return StorageKeys.state(self.namespace)

    # Lifecycle

    def init(self, config: InflationConfig) -> InflationState:
        """
        Persist the config and the genesis state.

        Calling init again overwrites both records and resets the state.

        Raises:
            ConfigError: if the mode payload is missing or a cap exceeds 10000 bps
        """
        if not isinstance(config, InflationConfig):
            raise ConfigError(f"expected InflationConfig, got {type(config).__name__}")
        config.check()

        with self._lock:
            if self.is_initialized():
                logger.warning(f"Re-initializing rebalancer {self.namespace}; state reset to defaults")

            state = default_state()
            self.store.set_many({
                self._config_key: config.to_dict(),
                self._state_key: state.to_dict(),
            })

        logger.info(f"Initialized rebalancer {self.namespace} in {config.mode.kind.value} mode")
        return state

    def is_initialized(self) -> bool:
        return self.store.contains(self._config_key) and self.store.contains(self._state_key)

    # Reads

    def get_config(self) -> InflationConfig:
        with self._lock:
            return self._load()[0]

    def get_state(self) -> InflationState:
        with self._lock:
            return self._load()[1]

    def _load(self) -> Tuple[InflationConfig, InflationState]:
        raw_config = self.store.get(self._config_key)
        raw_state = self.store.get(self._state_key)
        if raw_config is None or raw_state is None:
            raise NotInitializedError(self.namespace)
        return InflationConfig.from_dict(raw_config), InflationState.from_dict(raw_state)

    # Oracle feed

    def post_index(
        self,
        caller: str,
        index_id: str,
        period: str,
        value_bps: int,
        now: Optional[int] = None,
    ) -> List[RebalancerEvent]:
        """
        Record a new inflation index sample from the configured oracle.

        Only `last_index` changes; status and weights are recomputed on the
        next rebalance.

        Args:
            caller: Host-attested caller account
            index_id: Index identifier, e.g. "US_CPI_U"
            period: Period label, e.g. "2026-01"
            value_bps: Index value in bps (uint32)
            now: Posting time in seconds (defaults to the clock)

        Returns:
            [IndexPosted]

        Raises:
            NotInitializedError: if init has not run
            AuthorizationError: outside Oracle mode or from a non-oracle caller
            InputRangeError: if index_id or period is not a string, or
                value_bps is not a uint32
        """
        with self._lock:
            config, state = self._load()

            if not isinstance(config.mode, OracleMode):
                raise AuthorizationError(f"{self.namespace}: not in Oracle mode")
            if caller != config.mode.oracle_account:
                raise AuthorizationError(f"{self.namespace}: oracle auth failed for {caller}")
            for name, value in (("index_id", index_id), ("period", period)):
                if not isinstance(value, str):
                    raise InputRangeError(f"{name} must be a string, got {value!r}")
            if not in_range(value_bps, 0, U32_MAX):
                raise InputRangeError(f"value_bps must be a uint32, got {value_bps!r}")

            ts = self._now(now)
            sample = IndexSample(
                index_id=index_id,
                period=period,
                value_bps=value_bps,
                posted_at_seconds=ts,
            )
            self.store.set(self._state_key, state.with_changes(last_index=sample).to_dict())

        logger.info(f"Index posted to {self.namespace}: {index_id} {period} = {value_bps} bps")
        return self._emit([
            IndexPosted(index_id=index_id, period=period, value_bps=value_bps, posted_at_sec=ts),
        ])

    # Rebalance

    def rebalance(self, now: Optional[int] = None) -> List[RebalancerEvent]:
        """
        Recompute status and apply one bounded reweighting step.

        Any caller may trigger this; the cooldown and freshness gates bound
        what it can do.

        Args:
            now: Evaluation time in seconds (defaults to the clock)

        Returns:
            [StatusUpdated] on a stale-oracle freeze, otherwise
            [StatusUpdated, Rebalanced]

        Raises:
            NotInitializedError: if init has not run
            CooldownActiveError: if the previous rebalance is too recent
            ArithmeticOverflow: if the real return score leaves int32
        """
        with self._lock:
            config, state = self._load()
            ts = self._now(now)

            self._enforce_cooldown(config, state, ts)

            if config.is_oracle and not self._is_fresh(config, state, ts):
                # Freeze: weights and the cooldown timer stay where they are
                frozen = state.with_changes(
                    status=InflationStatus.ORACLE_STALE,
                    real_return_score_bps=0,
                )
                self.store.set(self._state_key, frozen.to_dict())
                events: List[RebalancerEvent] = [
                    StatusUpdated(
                        status=frozen.status,
                        real_return_score_bps=frozen.real_return_score_bps,
                        at_sec=ts,
                    ),
                ]
                logger.info(f"Rebalancer {self.namespace} frozen: oracle stale at {ts}")
            else:
                score = self.real_return_score(config, state)
                status = InflationStatus.BEHIND if score < 0 else InflationStatus.HEALTHY

                safety = state.safety_weight_bps
                growth = state.growth_weight_bps
                delta = 0
                if status is InflationStatus.BEHIND:
                    delta = min(
                        config.rebalance_step_bps,
                        safety,
                        saturating_sub(config.growth_cap_bps, growth),
                    )
                    if delta > 0:
                        safety -= delta
                        growth += delta

                safety, growth, liquidity = clamp_weights(
                    config, safety, growth, state.liquidity_weight_bps
                )

                updated = state.with_changes(
                    real_return_score_bps=score,
                    status=status,
                    safety_weight_bps=safety,
                    growth_weight_bps=growth,
                    liquidity_weight_bps=liquidity,
                    last_rebalance_at_seconds=ts,
                )
                self.store.set(self._state_key, updated.to_dict())
                events = [
                    StatusUpdated(status=status, real_return_score_bps=score, at_sec=ts),
                    Rebalanced(from_safety_bps=delta, to_growth_bps=delta, at_sec=ts),
                ]
                logger.info(
                    f"Rebalanced {self.namespace}: status={status.value} score={score} "
                    f"moved={delta} bps weights=({safety}, {growth}, {liquidity})"
                )

        return self._emit(events)

    @staticmethod
    def real_return_score(config: InflationConfig, state: InflationState) -> int:
        """
        vault_growth - inflation - min_real_return, all in bps.

        Oracle mode uses the last sample's value as a flat term; no
        annualization is applied.
        """
        if config.is_oracle:
            inflation_bps = state.last_index.value_bps if state.last_index else 0
        else:
            inflation_bps = config.fixed_hurdle_bps_annual

        score = VAULT_GROWTH_BPS - inflation_bps - config.min_real_return_bps
        if not I32_MIN <= score <= I32_MAX:
            raise ArithmeticOverflow(f"real_return_score_bps out of int32 range: {score}")
        return score

    # Gates

    @staticmethod
    def _enforce_cooldown(config: InflationConfig, state: InflationState, now: int) -> None:
        if state.last_rebalance_at_seconds == 0:
            return
        elapsed = saturating_sub(now, state.last_rebalance_at_seconds)
        if elapsed < config.rebalance_cooldown_seconds:
            logger.debug(f"Cooldown active: {elapsed}s < {config.rebalance_cooldown_seconds}s")
            raise CooldownActiveError(elapsed, config.rebalance_cooldown_seconds)

    @staticmethod
    def _is_fresh(config: InflationConfig, state: InflationState, now: int) -> bool:
        if state.last_index is None:
            return False
        age = saturating_sub(now, state.last_index.posted_at_seconds)
        return age <= config.max_oracle_age_seconds

    def _now(self, now: Optional[int]) -> int:
        ts = self.clock() if now is None else now
        if not in_range(ts, 0, U64_MAX):
            raise InputRangeError(f"timestamp must be a uint64, got {ts!r}")
        return ts

    def _emit(self, events: List[RebalancerEvent]) -> List[RebalancerEvent]:
        for event in events:
            logger.debug(f"EVENT {event.to_json()}")
            if self.event_sink is not None:
                self.event_sink(event)
        return events


def clamp_weights(
    config: InflationConfig,
    safety: int,
    growth: int,
    liquidity: int,
) -> Tuple[int, int, int]:
    """
    Truncate each weight to its cap, then trim any excess over 10000 bps.

    Safety absorbs the excess first, saturating at zero.
    """
    safety = min(safety, config.safety_cap_bps)
    growth = min(growth, config.growth_cap_bps)
    liquidity = min(liquidity, config.liquidity_cap_bps)

    total = safety + growth + liquidity
    if total > BPS_DENOMINATOR:
        safety = saturating_sub(safety, total - BPS_DENOMINATOR)
    return safety, growth, liquidity
