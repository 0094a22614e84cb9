"""FastAPI server exposing the simulation to renderers and input handlers.

Provides:
- WebSocket /ws/frames: stream Frame snapshots at ~30 FPS
- WebSocket /ws/control: play/pause/set_speed/reset/export commands
- REST API for world summary, frames, settings, reset, export, stepping and resizing
"""

from __future__ import annotations

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from enum import Enum
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, Field

from dlasim.config import SimulationSettings, get_settings
from dlasim.engine.simulation import create_world, reset_world, resize_world, tick_world
from dlasim.projection.projector import Frame, frame_to_dict, project

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from dlasim.model.world import World

logger = logging.getLogger(__name__)


class SimulationState:
    """Thread-safe owner of the single simulation world.

    The background thread and the request handlers only touch the world
    while holding the lock, so nobody observes it mid-tick.
    """

    def __init__(self, settings: SimulationSettings | None = None) -> None:
        self._settings = settings if settings is not None else get_settings()
        self._world = create_world(self._settings)
        self._running = False
        self._speed = 1.0
        self._paused = True
        self._lock = threading.Lock()
        self._latest_frame: Frame | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def world(self) -> World:
        with self._lock:
            return self._world

    @property
    def settings(self) -> SimulationSettings:
        return self._settings

    @property
    def paused(self) -> bool:
        with self._lock:
            return self._paused

    @paused.setter
    def paused(self, value: bool) -> None:
        with self._lock:
            self._paused = value

    @property
    def speed(self) -> float:
        with self._lock:
            return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        """Set simulation speed (clamped to 0.1-10.0)."""
        with self._lock:
            self._speed = max(0.1, min(10.0, value))

    @property
    def latest_frame(self) -> Frame | None:
        with self._lock:
            return self._latest_frame

    def tick(self) -> None:
        """Execute one simulation tick and refresh the latest frame."""
        with self._lock:
            tick_world(self._world)
            self._latest_frame = project(self._world)

    def frame(self) -> Frame:
        """Latest frame, projecting the current world if none exists yet."""
        with self._lock:
            if self._latest_frame is None:
                self._latest_frame = project(self._world)
            return self._latest_frame

    def reset(self) -> None:
        """Clear all state and reseed default walkers and clusters."""
        with self._lock:
            reset_world(self._world)
            self._latest_frame = None

    def resize(self, width: float, height: float) -> None:
        with self._lock:
            resize_world(self._world, width, height)
            self._latest_frame = None

    def summary(self) -> dict[str, Any]:
        """Counts and flags for the current tick, read under the lock."""
        with self._lock:
            world = self._world
            return {
                "tick": world.tick,
                "paused": self._paused,
                "speed": self._speed,
                "width": world.edges.width,
                "height": world.edges.height,
                "particle_count": len(world.particles),
                "num_walkers": world.num_walkers,
                "shape_count": len(world.shapes),
                "line_count": len(world.lines),
            }

    def export(self) -> dict[str, Any]:
        """Serialize the current visual state."""
        with self._lock:
            return frame_to_dict(project(self._world))

    def start(self) -> None:
        """Start the background simulation thread."""
        if self._running:
            return
        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._simulation_loop, daemon=True)
        self._thread.start()
        logger.info("Simulation thread started")

    def stop(self) -> None:
        """Stop the background simulation thread."""
        if not self._running:
            return
        self._running = False
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
        logger.info("Simulation thread stopped")

    def _simulation_loop(self) -> None:
        """Tick at ~30 Hz scaled by speed while not paused."""
        target_fps = 30.0
        while self._running and not self._stop_event.is_set():
            if not self.paused:
                self.tick()

            effective_speed = self.speed if not self.paused else 1.0
            self._stop_event.wait(timeout=1.0 / (target_fps * effective_speed))


_sim_state: SimulationState | None = None


def get_sim_state() -> SimulationState:
    """Get or create the global simulation state."""
    global _sim_state
    if _sim_state is None:
        _sim_state = SimulationState()
    return _sim_state


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start the simulation thread with the app and stop it on shutdown."""
    sim = get_sim_state()
    sim.start()
    yield
    sim.stop()


app = FastAPI(
    title="dlasim",
    description="Diffusion-limited aggregation engine",
    version="0.1.0",
    lifespan=lifespan,
)


class WorldStateResponse(BaseModel):
    """Summary of the world state."""

    tick: int = Field(description="Current simulation tick")
    paused: bool = Field(description="Whether simulation is paused")
    speed: float = Field(description="Simulation speed multiplier")
    width: float = Field(description="Bounds width")
    height: float = Field(description="Bounds height")
    particle_count: int = Field(description="Walkers plus cluster particles")
    num_walkers: int = Field(description="Walker counter")
    shape_count: int = Field(description="Static obstacle count")
    line_count: int = Field(description="Captured aggregation edges")


class ControlCommandResponse(BaseModel):
    """Response for control commands."""

    success: bool = Field(description="Whether command succeeded")
    message: str = Field(description="Status message")


class ResizeRequest(BaseModel):
    """New simulation bounds."""

    width: float = Field(gt=0, description="Bounds width")
    height: float = Field(gt=0, description="Bounds height")


@app.get("/api/world", response_model=WorldStateResponse, tags=["world"])
async def get_world() -> WorldStateResponse:
    """Get current world state summary."""
    return WorldStateResponse(**get_sim_state().summary())


@app.get("/api/frame", tags=["world"])
async def get_frame() -> dict[str, Any]:
    """Get the latest render snapshot."""
    return frame_to_dict(get_sim_state().frame())


@app.get("/api/settings", tags=["world"])
async def get_world_settings() -> dict[str, Any]:
    """Get the active simulation settings."""
    return get_sim_state().settings.model_dump(mode="json")


@app.post("/api/world/reset", response_model=ControlCommandResponse, tags=["world"])
async def reset() -> ControlCommandResponse:
    """Reset the world to its tick-0 state."""
    get_sim_state().reset()
    return ControlCommandResponse(success=True, message="World reset")


@app.post("/api/world/pause", response_model=ControlCommandResponse, tags=["world"])
async def pause_simulation() -> ControlCommandResponse:
    get_sim_state().paused = True
    return ControlCommandResponse(success=True, message="Simulation paused")


@app.post("/api/world/play", response_model=ControlCommandResponse, tags=["world"])
async def play_simulation() -> ControlCommandResponse:
    get_sim_state().paused = False
    return ControlCommandResponse(success=True, message="Simulation playing")


@app.post("/api/world/speed", response_model=ControlCommandResponse, tags=["world"])
async def set_speed(speed: float = 1.0) -> ControlCommandResponse:
    """Set the simulation speed multiplier (clamped to 0.1-10.0)."""
    if speed <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Speed must be positive",
        )
    sim = get_sim_state()
    sim.speed = speed
    return ControlCommandResponse(success=True, message=f"Speed set to {sim.speed}")


@app.post("/api/world/step", response_model=ControlCommandResponse, tags=["world"])
def step_simulation(ticks: int = 1) -> ControlCommandResponse:
    """Advance the world by a number of ticks regardless of pause state.

    Runs in the threadpool, off the event loop that streams frames.
    """
    if ticks < 1 or ticks > 10000:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ticks must be between 1 and 10000",
        )
    sim = get_sim_state()
    for _ in range(ticks):
        sim.tick()
    return ControlCommandResponse(success=True, message=f"Advanced {ticks} tick(s)")


@app.post("/api/world/resize", response_model=ControlCommandResponse, tags=["world"])
async def resize(request: ResizeRequest) -> ControlCommandResponse:
    """Recompute the simulation bounds, e.g. after a viewport resize."""
    get_sim_state().resize(request.width, request.height)
    return ControlCommandResponse(
        success=True, message=f"Bounds set to {request.width:g}x{request.height:g}"
    )


@app.post("/api/world/export", tags=["world"])
async def export() -> dict[str, Any]:
    """Serialize the current visual state."""
    return get_sim_state().export()


class ConnectionManager:
    """Track open frame-stream and control WebSocket connections."""

    def __init__(self) -> None:
        self.frame_connections: list[WebSocket] = []
        self.control_connections: list[WebSocket] = []

    async def connect_frames(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.frame_connections.append(websocket)
        logger.info("Frame client connected (%d total)", len(self.frame_connections))

    async def connect_control(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.control_connections.append(websocket)
        logger.info("Control client connected (%d total)", len(self.control_connections))

    def disconnect_frames(self, websocket: WebSocket) -> None:
        if websocket in self.frame_connections:
            self.frame_connections.remove(websocket)

    def disconnect_control(self, websocket: WebSocket) -> None:
        if websocket in self.control_connections:
            self.control_connections.remove(websocket)


manager = ConnectionManager()


@app.websocket("/ws/frames")
async def websocket_frames(websocket: WebSocket) -> None:
    """Stream Frame snapshots at ~30 FPS."""
    await manager.connect_frames(websocket)
    sim = get_sim_state()

    try:
        interval = 1.0 / 30.0
        loop = asyncio.get_running_loop()
        while True:
            start = loop.time()
            await websocket.send_json(frame_to_dict(sim.frame()))
            elapsed = loop.time() - start
            await asyncio.sleep(max(0.0, interval - elapsed))

    except WebSocketDisconnect:
        manager.disconnect_frames(websocket)
    except Exception as e:
        logger.error("Frame streaming error: %s", str(e))
        manager.disconnect_frames(websocket)


class ControlCommand(Enum):
    """Valid control commands."""

    PLAY = "play"
    PAUSE = "pause"
    SET_SPEED = "set_speed"
    RESET = "reset"
    EXPORT = "export"


@app.websocket("/ws/control")
async def websocket_control(websocket: WebSocket) -> None:
    """Receive control commands.

    Accepts commands:
    - {"type": "play"} / {"type": "pause"}
    - {"type": "set_speed", "speed": 2.0}
    - {"type": "reset"} - clear and reseed the world
    - {"type": "export"} - reply includes the serialized frame under "frame"
    """
    await manager.connect_control(websocket)
    sim = get_sim_state()

    try:
        while True:
            data = await websocket.receive_json()
            cmd_type = str(data.get("type", "")).lower()

            response: dict[str, Any]
            if cmd_type == ControlCommand.PLAY.value:
                sim.paused = False
                response = {"success": True, "message": "Simulation playing"}
            elif cmd_type == ControlCommand.PAUSE.value:
                sim.paused = True
                response = {"success": True, "message": "Simulation paused"}
            elif cmd_type == ControlCommand.SET_SPEED.value:
                try:
                    sim.speed = float(data.get("speed", 1.0))
                    response = {"success": True, "message": f"Speed set to {sim.speed}"}
                except (TypeError, ValueError):
                    response = {"success": False, "message": "Invalid speed value"}
            elif cmd_type == ControlCommand.RESET.value:
                sim.reset()
                response = {"success": True, "message": "World reset"}
            elif cmd_type == ControlCommand.EXPORT.value:
                response = {"success": True, "message": "Frame exported", "frame": sim.export()}
            else:
                response = {"success": False, "message": f"Unknown command: {cmd_type}"}

            await websocket.send_json(response)

    except WebSocketDisconnect:
        manager.disconnect_control(websocket)
    except Exception as e:
        logger.error("Control WebSocket error: %s", str(e))
        manager.disconnect_control(websocket)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
