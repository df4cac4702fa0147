#!/usr/bin/env python3
# agents/multi/session_tracker.py
#
# Per-connection memory of the last (state, action) issued to each bot,
# waiting for the reward that tells us how it went.
# One tracker per connection; never shared between connections.

import time
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class PendingDecision:
    state_key: str
    action: int
    issued_at: float = field(default_factory=time.time)


class SessionTracker:
    def __init__(self):
        self._pending: Dict[str, PendingDecision] = {}

    def __len__(self):
        return len(self._pending)

    def record_decision(self, bot_id: str, state_key: str, action: int) -> PendingDecision:
        # Last write wins: a second observation before the reward replaces the
        # first decision, which is then never learned from.
        decision = PendingDecision(state_key, action)
        self._pending[bot_id] = decision
        return decision

    def consume_decision(self, bot_id: str) -> Optional[PendingDecision]:
        """Pop the pending decision for `bot_id`, or None if there is none."""
        return self._pending.pop(bot_id, None)

    def clear(self) -> int:
        """Drop every pending decision (connection closed). Returns how many were discarded."""
        dropped = len(self._pending)
        self._pending.clear()
        return dropped
