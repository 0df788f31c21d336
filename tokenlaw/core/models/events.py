"""Rebalancer events.

Field names and types are a stable audit contract; do not rename them.
"""

import json
from dataclasses import dataclass
from typing import Union

from ..constants import EVENT_INDEX_POSTED, EVENT_REBALANCED, EVENT_STATUS_UPDATED
from .inflation import InflationStatus


@dataclass(frozen=True)
class IndexPosted:
    index_id: str
    period: str
    value_bps: int
    posted_at_sec: int

    name = EVENT_INDEX_POSTED

    def to_dict(self) -> dict:
        return {
            "event": self.name,
            "index_id": self.index_id,
            "period": self.period,
            "value_bps": self.value_bps,
            "posted_at_sec": self.posted_at_sec,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


@dataclass(frozen=True)
class StatusUpdated:
    status: InflationStatus
    real_return_score_bps: int
    at_sec: int

    name = EVENT_STATUS_UPDATED

    def to_dict(self) -> dict:
        return {
            "event": self.name,
            "status": self.status.value,
            "real_return_score_bps": self.real_return_score_bps,
            "at_sec": self.at_sec,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


@dataclass(frozen=True)
class Rebalanced:
    from_safety_bps: int
    to_growth_bps: int
    at_sec: int

    name = EVENT_REBALANCED

    def to_dict(self) -> dict:
        return {
            "event": self.name,
            "from_safety_bps": self.from_safety_bps,
            "to_growth_bps": self.to_growth_bps,
            "at_sec": self.at_sec,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


RebalancerEvent = Union[IndexPosted, StatusUpdated, Rebalanced]
