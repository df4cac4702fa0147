#!/usr/bin/env python3
# tools/summarize_qtable.py
#
# Offline look at a saved qtable.json:
# - one row per state, bucket columns decoded from the key (hp|ammo|dist|zone|knife)
# - one column per action, plus the greedy action and its value
# - prints a short summary, optionally writes the table to CSV
#
# Usage (from the repo root): python -m tools.summarize_qtable [qtable.json] [out.csv]

import os
import sys

import pandas as pd

from agents.tabular.discretizer import SEPARATOR
from agents.tabular.q_table import ACTIONS
from agents.tabular.store import QTableStore

BUCKET_COLUMNS = ['hp', 'ammo', 'dist', 'zone', 'knife']


def load_frame(path):
    rows = QTableStore(path, n_actions=len(ACTIONS)).load()
    records = []
    for key, values in rows.items():
        parts = key.split(SEPARATOR)
        if len(parts) != len(BUCKET_COLUMNS):
            continue
        try:
            buckets = [int(p) for p in parts]
        except ValueError:
            continue
        rec = dict(zip(BUCKET_COLUMNS, buckets))
        rec['state'] = key
        rec.update(zip(ACTIONS, values))
        records.append(rec)

    df = pd.DataFrame(records, columns=['state'] + BUCKET_COLUMNS + list(ACTIONS))
    if df.empty:
        df['best_action'] = pd.Series(dtype=object)
        df['best_value'] = pd.Series(dtype=float)
        return df
    # idxmax keeps the first max, same tie-break as the live policy
    df['best_action'] = df[list(ACTIONS)].idxmax(axis=1)
    df['best_value'] = df[list(ACTIONS)].max(axis=1)
    return df.sort_values(BUCKET_COLUMNS).reset_index(drop=True)


def summarize(df):
    return {
        'states': int(len(df)),
        'unvisited': int((df[list(ACTIONS)] == 0).all(axis=1).sum()) if len(df) else 0,
        'best_action_counts': df['best_action'].value_counts().to_dict() if len(df) else {},
    }


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else os.path.join(os.getcwd(), 'qtable.json')
    out = argv[1] if len(argv) > 1 else None

    df = load_frame(path)
    if df.empty:
        print(f"[!] No usable states in {path}")
        return 1
    info = summarize(df)
    print(f"[+] {info['states']} states ({info['unvisited']} still all-zero)")
    for action, count in info['best_action_counts'].items():
        print(f"    {action:<15} best in {count} states")
    if out:
        df.to_csv(out, index=False)
        print(f"[+] Wrote {len(df)} rows to {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
