#!/usr/bin/env python3
# server/__main__.py
#
# Entry point: python -m server [--port 8080] [--save-path qtable.json] ...
# Flags override environment variables, which override the defaults in
# server/config.py.

import argparse
import logging
import sys

from aiohttp import web

from server.bot_server import create_app
from server.config import ConfigError, ServerConfig

logger = logging.getLogger("server")


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="bot-rl-server",
                                description="Tabular Q-learning server for game bots.")
    p.add_argument("--host")
    p.add_argument("--port", type=int, help="WebSocket/HTTP port (env WS_PORT, default 8080)")
    p.add_argument("--save-path", help="Q-table JSON file (env QTABLE_PATH, default qtable.json)")
    p.add_argument("--save-interval", type=float, help="autosave period in seconds (env SAVE_INTERVAL, default 30)")
    p.add_argument("--alpha", type=float, help="learning rate (env ALPHA, default 0.12)")
    p.add_argument("--gamma", type=float, help="discount factor (env GAMMA, default 0.96)")
    p.add_argument("--epsilon", type=float, help="initial exploration rate (env EPSILON, default 0.25)")
    p.add_argument("--epsilon-decay", type=float)
    p.add_argument("--epsilon-floor", type=float)
    p.add_argument("--heartbeat", type=float)
    p.add_argument("--log-level")
    return p.parse_args(argv)


def load_config(argv=None, environ=None):
    args = parse_args(argv)
    return ServerConfig.from_env(environ).override(**vars(args))


def main(argv=None):
    try:
        cfg = load_config(argv)
    except ConfigError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2

    logging.basicConfig(level=cfg.log_level.upper(),
                        format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logger.info("Listening on %s:%s (WebSocket upgrade supported)", cfg.host, cfg.port)
    web.run_app(create_app(cfg), host=cfg.host, port=cfg.port, print=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
