#!/usr/bin/env python3
# agents/tabular/learner.py
# One-step temporal-difference (Q-learning) update on a QTable.

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class TDLearner:
    alpha: float = 0.12     # learning rate
    gamma: float = 0.96     # discount factor

    def update(self, table, state_key, action, reward, next_state_key):
        """Q[s,a] += alpha * (r + gamma * max_a' Q[s',a'] - Q[s,a]); returns the new Q[s,a].

        An update that would overflow to inf/nan is skipped and the old value kept,
        so the table always stays finite (and serializable).
        """
        with table.lock:
            row = table.ensure(state_key)
            best_next = float(table.ensure(next_state_key).max())
            current = float(row[action])
            new = current + self.alpha * (reward + self.gamma * best_next - current)
            if not math.isfinite(new):
                logger.warning("Skipping non-finite update for %s action %d (reward=%r)",
                               state_key, action, reward)
                return current
            row[action] = new
            return new
