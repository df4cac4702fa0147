#!/usr/bin/env python3
# agents/tabular/q_table.py
#
# Shared tabular action-value store: state key -> np.array of len(ACTIONS).
# One RLock guards the whole table. Callers that need "read, compute, write"
# to be atomic (policy, learner) hold table.lock around the sequence; the
# helpers below take it themselves so they also nest.

import threading

import numpy as np

# Order matters: the index into this tuple is the action id.
ACTIONS = (
    'MOVE_TO_PLAYER',
    'MOVE_RANDOM',
    'SHOOT',
    'PICK_CRATE',
    'RETREAT',
    'IDLE',
)


class QTable:
    def __init__(self, n_actions=len(ACTIONS)):
        self.n_actions = n_actions
        self.lock = threading.RLock()
        self._rows = {}     # state key -> np.ndarray(n_actions,)

    def __len__(self):
        with self.lock:
            return len(self._rows)

    def __contains__(self, key):
        with self.lock:
            return key in self._rows

    def ensure(self, key):
        """Return the live row for `key`, creating a zero row on first use."""
        with self.lock:
            row = self._rows.get(key)
            if row is None:
                row = np.zeros(self.n_actions, dtype=np.float64)
                self._rows[key] = row
            return row

    def values(self, key):
        """Copy of the row for `key` (ensured)."""
        with self.lock:
            return self.ensure(key).copy()

    def snapshot(self):
        # copy under the lock, serialize outside it
        with self.lock:
            return {key: row.tolist() for key, row in self._rows.items()}

    def load(self, rows):
        """Replace the table contents with `rows` (key -> sequence of floats)."""
        fresh = {}
        for key, values in rows.items():
            arr = np.asarray(values, dtype=np.float64)
            if arr.shape != (self.n_actions,):
                raise ValueError(f"row {key!r} has shape {arr.shape}, expected ({self.n_actions},)")
            fresh[key] = arr
        with self.lock:
            self._rows = fresh
