#!/usr/bin/env python3
# agents/multi/coordinator.py
#
# Glue between the transport and the tabular agent:
# - discretizes observations and picks actions for each bot,
# - matches rewards to the decision they belong to and applies the TD update,
# - owns the exploration rate and its periodic decay,
# - persists the shared Q-table (snapshot under the table lock, write outside it).
#
# One Coordinator per process, shared by every connection. Each connection
# brings its own SessionTracker.

import asyncio
import logging
import threading

from agents.multi.messages import (
    ActionMsg, ObservationMsg, PingMsg, PongMsg, RewardMsg, SaveAck, SaveMsg,
)
from agents.tabular.discretizer import discretize
from agents.tabular.learner import TDLearner
from agents.tabular.policy import EpsilonGreedyPolicy
from agents.tabular.q_table import ACTIONS, QTable

logger = logging.getLogger(__name__)


class Coordinator:
    def __init__(self, store, alpha=0.12, gamma=0.96, epsilon=0.25,
                 epsilon_decay=0.9995, epsilon_floor=0.01, policy=None, actions=ACTIONS):
        self.actions = tuple(actions)
        self.table = QTable(n_actions=len(self.actions))
        self.store = store
        self.learner = TDLearner(alpha=alpha, gamma=gamma)
        self.policy = policy or EpsilonGreedyPolicy()
        self.epsilon_decay = epsilon_decay
        self.epsilon_floor = epsilon_floor
        self._epsilon = max(epsilon_floor, epsilon)
        self._epsilon_lock = threading.Lock()

    @property
    def epsilon(self):
        with self._epsilon_lock:
            return self._epsilon

    def load(self):
        rows = self.store.load()
        try:
            self.table.load(rows)
        except ValueError as e:
            logger.warning("Discarding saved qtable: %s", e)
        return len(self.table)

    def persist(self):
        """Write the whole table to the store. Never raises on I/O failure; returns success."""
        rows = self.table.snapshot()
        saved = self.store.save(rows)
        if saved:
            logger.debug("Saved qtable (%d states) to %s", len(rows), self.store.path)
        return saved

    def decay_epsilon(self):
        with self._epsilon_lock:
            self._epsilon = max(self.epsilon_floor, self._epsilon * self.epsilon_decay)
            return self._epsilon

    # ------------------------------
    # Per-message handling
    # ------------------------------
    def observe(self, tracker, msg):
        state_key = discretize(msg.obs)
        action = self.policy.select_action(self.table, self.epsilon, state_key)
        tracker.record_decision(msg.bot_id, state_key, action)
        return ActionMsg(msg.bot_id, self.actions[action])

    def reward(self, tracker, msg):
        """Apply the reward to the bot's pending decision. Returns the new Q value, or None if nothing was pending."""
        pending = tracker.consume_decision(msg.bot_id)
        if pending is None:
            # duplicate or out-of-order reward: nothing to learn from
            return None
        next_key = discretize(msg.next_obs)
        return self.learner.update(self.table, pending.state_key, pending.action,
                                   msg.reward, next_key)

    async def handle(self, tracker, request):
        """Dispatch one parsed request; returns the response to send, if any."""
        if isinstance(request, ObservationMsg):
            return self.observe(tracker, request)
        if isinstance(request, RewardMsg):
            self.reward(tracker, request)
            return None
        if isinstance(request, SaveMsg):
            saved = await asyncio.to_thread(self.persist)
            return SaveAck(saved)
        if isinstance(request, PingMsg):
            return PongMsg()
        raise TypeError(f"unhandled request type {type(request).__name__}")

    async def tick(self):
        """Periodic autosave + exploration decay."""
        await asyncio.to_thread(self.persist)
        epsilon = self.decay_epsilon()
        logger.info("Autosaved qtable. states=%d epsilon=%.3f", len(self.table), epsilon)
        return epsilon
