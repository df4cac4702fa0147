#!/usr/bin/env python3
# server/bot_server.py
#
# aiohttp app serving game clients on a single port:
#   GET /        websocket upgrade -> bot connection (plain banner otherwise)
#   GET /qtable  small JSON summary of the shared Q-table
#   GET /save    force a save
# Plus a background task that autosaves and decays epsilon every
# `save_interval` seconds.

import asyncio
import contextlib
import logging

from aiohttp import WSMsgType, web

from agents.multi.coordinator import Coordinator
from agents.multi.messages import encode, parse_message
from agents.multi.session_tracker import SessionTracker
from agents.tabular.q_table import ACTIONS
from agents.tabular.store import QTableStore

logger = logging.getLogger(__name__)


def build_coordinator(cfg):
    store = QTableStore(cfg.save_path, n_actions=len(ACTIONS))
    return Coordinator(store, alpha=cfg.alpha, gamma=cfg.gamma, epsilon=cfg.epsilon,
                       epsilon_decay=cfg.epsilon_decay, epsilon_floor=cfg.epsilon_floor)


# ------------------------------
# Bot connections
# ------------------------------
async def bot_socket(request):
    app = request.app
    cfg = app["config"]
    coordinator = app["coordinator"]

    ws = web.WebSocketResponse(heartbeat=cfg.heartbeat)
    if not ws.can_prepare(request).ok:
        return web.Response(text=f"Bot RL Server: WebSocket endpoint at ws://<host>:{cfg.port}")
    await ws.prepare(request)

    tracker = SessionTracker()
    logger.info("Client connected: %s", request.remote)
    try:
        # one message at a time, in arrival order
        async for msg in ws:
            if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                req = parse_message(msg.data)
                if req is None:
                    continue
                try:
                    response = await coordinator.handle(tracker, req)
                except Exception:
                    logger.exception("Error handling %s from %s", type(req).__name__, request.remote)
                    continue
                if response is not None:
                    try:
                        await ws.send_str(encode(response))
                    except ConnectionResetError:
                        logger.info("Client %s went away before the reply was sent", request.remote)
                        break
            elif msg.type == WSMsgType.ERROR:
                logger.error("WebSocket error from %s: %s", request.remote, ws.exception())
    finally:
        dropped = tracker.clear()
        logger.info("Client disconnected: %s (discarded %d pending decisions)", request.remote, dropped)
    return ws


# ------------------------------
# Inspection endpoints
# ------------------------------
async def qtable_summary(request):
    coordinator = request.app["coordinator"]
    return web.json_response({
        "size": len(coordinator.table),
        "epsilon": coordinator.epsilon,
        "actions": list(coordinator.actions),
    })


async def force_save(request):
    coordinator = request.app["coordinator"]
    if await asyncio.to_thread(coordinator.persist):
        return web.Response(text="saved")
    return web.Response(status=500, text="save failed")


# ------------------------------
# Lifecycle
# ------------------------------
async def autosave_loop(coordinator, interval):
    while True:
        await asyncio.sleep(interval)
        try:
            await coordinator.tick()
        except Exception:
            logger.exception("Autosave tick failed")


async def on_startup(app):
    coordinator = app["coordinator"]
    states = await asyncio.to_thread(coordinator.load)
    logger.info("Q-table ready: %d states, epsilon=%.3f", states, coordinator.epsilon)
    logger.info("Actions: %s", ", ".join(coordinator.actions))
    app["autosave_task"] = asyncio.create_task(
        autosave_loop(coordinator, app["config"].save_interval))


async def on_cleanup(app):
    task = app.get("autosave_task")
    if task:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
    coordinator = app["coordinator"]
    if await asyncio.to_thread(coordinator.persist):
        logger.info("Saved qtable on shutdown (%d states)", len(coordinator.table))


def create_app(cfg, coordinator=None):
    app = web.Application()
    app["config"] = cfg
    app["coordinator"] = coordinator or build_coordinator(cfg)
    app.router.add_get("/", bot_socket)
    app.router.add_get("/qtable", qtable_summary)
    app.router.add_get("/save", force_save)
    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)
    return app
