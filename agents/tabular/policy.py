#!/usr/bin/env python3
# agents/tabular/policy.py
# Epsilon-greedy action selection over a QTable row.

import random

import numpy as np


class EpsilonGreedyPolicy:
    def __init__(self, rng=None):
        self.rng = rng or random.Random()

    def select_action(self, table, epsilon, state_key):
        """
        Returns an action index in [0, table.n_actions).
        With probability `epsilon` a uniformly random action, otherwise the
        greedy one; ties go to the lowest index (np.argmax returns the first max).
        """
        with table.lock:
            qvals = table.ensure(state_key)
            if self.rng.random() < epsilon:
                return self.rng.randrange(table.n_actions)
            return int(np.argmax(qvals))
