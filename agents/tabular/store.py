#!/usr/bin/env python3
# agents/tabular/store.py
#
# JSON persistence for the Q-table: {"<state key>": [q0, q1, ...], ...}
# - load() never raises on a missing/corrupt file, it returns {} and logs.
# - save() rewrites the whole file via a temp file + os.replace so a crash
#   mid-write never leaves a truncated table behind.

import json
import logging
import math
import os
import tempfile

logger = logging.getLogger(__name__)


class QTableStore:
    def __init__(self, path, n_actions):
        self.path = os.path.abspath(path)
        self.n_actions = n_actions

    def _valid_row(self, values):
        if not isinstance(values, list) or len(values) != self.n_actions:
            return False
        for v in values:
            if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
                return False
        return True

    def load(self):
        if not os.path.exists(self.path):
            logger.info("No saved qtable at %s, starting empty", self.path)
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load qtable from %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring qtable at %s: expected a JSON object, got %s",
                           self.path, type(raw).__name__)
            return {}

        rows = {}
        skipped = 0
        for key, values in raw.items():
            if self._valid_row(values):
                rows[key] = [float(v) for v in values]
            else:
                skipped += 1
        if skipped:
            logger.warning("Skipped %d malformed rows in %s", skipped, self.path)
        logger.info("Loaded qtable from %s (%d states)", self.path, len(rows))
        return rows

    def save(self, rows):
        """Write `rows` wholesale. Returns True on success, False (logged) on I/O failure."""
        directory = os.path.dirname(self.path)
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix='.qtable-', suffix='.tmp', dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(rows, f)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            logger.warning("Failed to save qtable to %s: %s", self.path, e)
            return False
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
        return True
