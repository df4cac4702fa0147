#!/usr/bin/env python3
# agents/multi/messages.py
#
# Closed set of wire messages exchanged with game clients (JSON text frames).
#
# Inbound (client -> server):
#   {type:'obs',    botId, obs: {hp, ammo, dist, inZone, hasKnife}}
#   {type:'reward', botId, reward, nextObs: {...}}
#   {type:'save'}
#   {type:'ping'}
# Outbound (server -> client):
#   {type:'action', botId, action}
#   {type:'ok', msg:'saved'} / {type:'error', msg:'save failed'}
#   {type:'pong'}
#
# parse_message() returns None for anything outside these shapes; callers
# drop it without replying.

import json
import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from agents.tabular.discretizer import Observation

logger = logging.getLogger(__name__)

UNKNOWN_BOT = 'unknown'


@dataclass(frozen=True)
class ObservationMsg:
    bot_id: str
    obs: Observation


@dataclass(frozen=True)
class RewardMsg:
    bot_id: str
    reward: float
    next_obs: Observation


@dataclass(frozen=True)
class SaveMsg:
    pass


@dataclass(frozen=True)
class PingMsg:
    pass


Request = Union[ObservationMsg, RewardMsg, SaveMsg, PingMsg]


@dataclass(frozen=True)
class ActionMsg:
    bot_id: str
    action: str

    def to_wire(self):
        return {'type': 'action', 'botId': self.bot_id, 'action': self.action}


@dataclass(frozen=True)
class SaveAck:
    saved: bool

    def to_wire(self):
        if self.saved:
            return {'type': 'ok', 'msg': 'saved'}
        return {'type': 'error', 'msg': 'save failed'}


@dataclass(frozen=True)
class PongMsg:
    def to_wire(self):
        return {'type': 'pong'}


Response = Union[ActionMsg, SaveAck, PongMsg]


def _bot_id(data):
    bot_id = data.get('botId')
    # falsy ids (None, '', 0, false) all map to 'unknown'
    if not bot_id:
        return UNKNOWN_BOT
    return str(bot_id)


def _reward(value):
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def parse_message(raw) -> Optional[Request]:
    """Decode one text frame. Malformed, unknown or invalid input -> None."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Dropping non-JSON frame")
        return None
    if not isinstance(data, dict):
        logger.debug("Dropping non-object frame")
        return None

    kind = data.get('type')
    if kind == 'obs':
        return ObservationMsg(_bot_id(data), Observation.from_wire(data.get('obs')))
    if kind == 'reward':
        reward = _reward(data.get('reward'))
        if reward is None:
            logger.debug("Dropping reward with invalid value %r", data.get('reward'))
            return None
        return RewardMsg(_bot_id(data), reward, Observation.from_wire(data.get('nextObs')))
    if kind == 'save':
        return SaveMsg()
    if kind == 'ping':
        return PingMsg()

    logger.debug("Dropping message of unknown type %r", kind)
    return None


def encode(response: Response) -> str:
    return json.dumps(response.to_wire())
