"""WebSocket endpoint for real-time simulation streaming.

- /ws/simulation - Drive a simulation clock and stream one frame per tick
"""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from serialization.encoder import encode_frame
from simulation.clock import SimulationClock

logger = logging.getLogger("cislunar.ws")
router = APIRouter()


def apply_config(clock: SimulationClock, config: dict) -> None:
    """Apply a client config message to the clock.

    Keys (all optional): family, orbit, speed, trail, body_scale, paused.
    A family without an orbit selects the family's first catalog orbit.
    """
    family = config.get("family")
    orbit = config.get("orbit")
    if family is not None and orbit is not None:
        clock.select(str(family), str(orbit))
    elif family is not None:
        clock.select_family(str(family))
    elif orbit is not None:
        clock.select(clock.selector.family, str(orbit))

    if "speed" in config:
        clock.set_speed(float(config["speed"]))
    if "trail" in config:
        clock.set_trail_enabled(bool(config["trail"]))
    if "body_scale" in config:
        clock.set_body_scale(float(config["body_scale"]))
    if "paused" in config:
        if config["paused"]:
            clock.pause()
        else:
            clock.resume()


def _apply_message(clock: SimulationClock, raw: str, use_binary: bool) -> bool:
    """Apply a JSON config message; returns the (possibly updated) binary flag.

    Malformed JSON and bad values are logged and ignored.
    """
    try:
        config = json.loads(raw)
        if isinstance(config, dict):
            apply_config(clock, config)
            use_binary = bool(config.get("binary", use_binary))
    except (json.JSONDecodeError, TypeError, ValueError):
        logger.debug("Ignoring malformed config message: %r", raw)
    return use_binary


@router.websocket("/ws/simulation")
async def ws_simulation_stream(websocket: WebSocket):
    """Stream simulation frames for real-time 3D animation.

    Protocol:
    1. Client sends a JSON config message:
       {
         "family": "moon",          // orbit family (optional, default from settings)
         "orbit": "llo_polar",      // orbit id (optional, default = family's first)
         "speed": 1.0,              // speed multiplier 0.1-10 (optional)
         "trail": true,             // record and send the trail ribbon (optional)
         "body_scale": 20,          // rendered body size 10-50 (optional)
         "binary": false            // use binary encoding (optional, default=false)
       }
    2. Server streams one frame per tick (16 ms cadence).
    3. Client can send "pause", "resume", "reset", "stop", or a new config to change params.
    """
    await websocket.accept()
    logger.info("Simulation stream WebSocket connected")

    clock = SimulationClock()
    use_binary = False

    try:
        # Wait for initial config
        try:
            config_raw = await asyncio.wait_for(websocket.receive_text(), timeout=5.0)
            use_binary = _apply_message(clock, config_raw, use_binary)
        except asyncio.TimeoutError:
            # Use defaults if no config received within 5s
            pass

        stop = asyncio.Event()
        async for frame in clock.run(stop):
            if use_binary:
                await websocket.send_bytes(encode_frame(frame))
            else:
                await websocket.send_json(frame.to_dict())

            # Check for control messages (non-blocking)
            try:
                msg = await asyncio.wait_for(websocket.receive_text(), timeout=0.001)
            except asyncio.TimeoutError:
                continue

            command = msg.strip().lower()
            if command == "pause":
                clock.pause()
            elif command == "resume":
                clock.resume()
            elif command == "reset":
                clock.reset()
            elif command == "stop":
                stop.set()
            else:
                use_binary = _apply_message(clock, msg, use_binary)

    except WebSocketDisconnect:
        logger.info("Simulation stream WebSocket disconnected")
    except Exception as e:
        logger.error("Simulation stream error: %s", e)
        try:
            await websocket.send_json({"status": "error", "message": str(e)})
        except Exception:
            pass
    finally:
        try:
            await websocket.close()
        except Exception:
            pass
