from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import Optional, Set

import structlog
from fastapi import FastAPI, HTTPException, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from liftbank import (
    Building,
    BuildingConfig,
    ElevatorSettings,
    InvalidConfiguration,
    InvalidRequest,
    InvalidTransition,
    SystemNotAccepting,
)
from liftbank.log import configure_logging

logger = structlog.get_logger(__name__)


class BuildingParameters(BaseModel):
    floors: int
    elevators: int
    capacity: int
    door_open_ticks: int = 3
    idle_wait_ticks: int = 5
    out_of_service_grace: bool = True
    park_when_idle: bool = False


class RiderRequest(BaseModel):
    origin: int = Field(..., ge=0, description="Floor where the rider is waiting")
    destination: int = Field(..., ge=0, description="Floor the rider wants to reach")


class StepRequest(BaseModel):
    count: int = Field(1, ge=1, le=1000)


class SimulationManager:
    def __init__(self, config: BuildingConfig) -> None:
        self.building: Building = config.build()
        self.tick: int = 0
        self.auto_step_interval = config.auto_step_interval
        self.subscribers: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None and self.auto_step_interval > 0:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self._step(1)
                payload = self.current_state()
            await self.publish(payload)
            await asyncio.sleep(self.auto_step_interval)

    async def publish(self, state: dict) -> None:
        """Push ``state`` to every subscriber, dropping the ones that fail."""
        subscribers = list(self.subscribers)
        results = await asyncio.gather(
            *(websocket.send_json(state) for websocket in subscribers),
            return_exceptions=True,
        )
        for websocket, result in zip(subscribers, results):
            if isinstance(result, Exception):
                logger.info("server.subscriber_dropped", error=repr(result))
                self.subscribers.discard(websocket)

    async def subscribe(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.subscribers.add(websocket)
        await websocket.send_json(self.current_state())

    def unsubscribe(self, websocket: WebSocket) -> None:
        self.subscribers.discard(websocket)

    def current_state(self) -> dict:
        state = self.building.get_status().to_dict()
        state["tick"] = self.tick
        return state

    async def reconfigure(self, config: BuildingConfig) -> dict:
        async with self._lock:
            self.building = config.build()
            self.tick = 0
            state = self.current_state()
        logger.info("server.reconfigured", floors=config.floors, elevators=config.elevators)
        await self.publish(state)
        return state

    async def start_system(self) -> dict:
        async with self._lock:
            self.building.start_system()
            state = self.current_state()
        await self.publish(state)
        return state

    async def stop_system(self) -> dict:
        async with self._lock:
            self.building.stop_system()
            state = self.current_state()
        await self.publish(state)
        return state

    async def add_request(self, origin: int, destination: int) -> dict:
        async with self._lock:
            self.building.add_request(origin, destination)
            state = self.current_state()
        await self.publish(state)
        return state

    async def step(self, count: int) -> dict:
        async with self._lock:
            self._step(count)
            state = self.current_state()
        await self.publish(state)
        return state

    async def take_out_of_service(self, elevator_id: Optional[int]) -> dict:
        async with self._lock:
            if elevator_id is None:
                self.building.take_all_out_of_service()
            else:
                self.building.take_elevator_out_of_service(elevator_id)
            state = self.current_state()
            state["elevator_id"] = elevator_id
        await self.publish(state)
        return state

    def _step(self, count: int) -> None:
        for _ in range(count):
            self.building.step()
            self.tick += 1


configure_logging()
manager = SimulationManager(BuildingConfig.from_env())


@asynccontextmanager
async def lifespan(app: FastAPI):  # pylint: disable=redefined-outer-name
    await manager.start()
    try:
        yield
    finally:
        await manager.stop()


app = FastAPI(title="Elevator Bank Simulation API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.get("/state/text", response_class=PlainTextResponse)
async def get_state_text() -> str:
    return str(manager.building.get_status())


@app.post("/building")
async def configure_building(parameters: BuildingParameters) -> dict:
    try:
        config = BuildingConfig(
            floors=parameters.floors,
            elevators=parameters.elevators,
            capacity=parameters.capacity,
            settings=ElevatorSettings(
                door_open_ticks=parameters.door_open_ticks,
                idle_wait_ticks=parameters.idle_wait_ticks,
                out_of_service_grace=parameters.out_of_service_grace,
                park_when_idle=parameters.park_when_idle,
            ),
        )
        return await manager.reconfigure(config)
    except InvalidConfiguration as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@app.post("/system/start")
async def start_system() -> dict:
    try:
        return await manager.start_system()
    except InvalidTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@app.post("/system/stop")
async def stop_system() -> dict:
    return await manager.stop_system()


@app.post("/requests")
async def add_request(request: RiderRequest) -> dict:
    try:
        return await manager.add_request(request.origin, request.destination)
    except SystemNotAccepting as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except InvalidRequest as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@app.post("/step")
async def step(request: Optional[StepRequest] = None) -> dict:
    return await manager.step(request.count if request else 1)


@app.post("/elevators/out-of-service")
async def take_all_out_of_service() -> dict:
    return await manager.take_out_of_service(None)


@app.post("/elevators/{elevator_id}/out-of-service")
async def take_elevator_out_of_service(elevator_id: int) -> dict:
    if not 0 <= elevator_id < manager.building.number_of_elevators:
        raise HTTPException(status_code=404, detail=f"Unknown elevator {elevator_id}")
    return await manager.take_out_of_service(elevator_id)


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.subscribe(websocket)
    try:
        async for _ in websocket.iter_text():
            pass
    finally:
        manager.unsubscribe(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
