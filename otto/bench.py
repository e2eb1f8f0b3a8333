"""Message-throughput benchmark for the actor engine."""

from __future__ import annotations

import argparse
import functools
import logging
import math
import random
import re
import sys
import time
from dataclasses import dataclass

from otto.actor import PID, Context, Engine, Initialized
from otto.physics import EntityRigidBody, EventRigidBodyUpdate
from otto.renderer import EntitiesResponse, EventEntityRenderUpdate, RequestEntities
from otto.system import Camera, Tick
from otto.vector import Vec2, Vec3

logger = logging.getLogger(__name__)

VALID_TICK_RATES = (64, 128)
_LOG_EVERY = 1000


@dataclass(frozen=True)
class _SetCameraPID:
    pid: PID


class MockRenderer:
    """Counts render updates and answers entity requests with nothing."""

    def __init__(self) -> None:
        self.message_count = 0

    def receive(self, ctx: Context) -> None:
        match ctx.message:
            case Initialized():
                logger.info("MockRenderer initialized")
            case EventEntityRenderUpdate():
                self.message_count += 1
                if self.message_count % _LOG_EVERY == 0:
                    logger.info("Renderer received %d messages", self.message_count)
            case RequestEntities():
                ctx.respond(EntitiesResponse(entities=()))


class MockPhysics:
    """Counts entity updates, spending a little time on each."""

    def __init__(self, processing_delay: float = 10e-6) -> None:
        self.message_count = 0
        self.processing_delay = processing_delay
        self.camera_pid: PID | None = None

    def receive(self, ctx: Context) -> None:
        match ctx.message:
            case Initialized():
                logger.info("MockPhysics initialized")
            case EventRigidBodyUpdate():
                self.message_count += 1
                if self.processing_delay > 0:
                    time.sleep(self.processing_delay)
                if self.message_count % _LOG_EVERY == 0:
                    logger.info("Physics received %d messages", self.message_count)
            case _SetCameraPID() as msg:
                self.camera_pid = msg.pid


class MockCamera:
    """A camera actor that only holds its initial state."""

    def __init__(self) -> None:
        self.camera = Camera(position=Vec3(0.0, 0.0, -2.0), rotation=Vec2(0.0, 0.0), zoom=1.0)

    def receive(self, ctx: Context) -> None:
        if isinstance(ctx.message, Initialized):
            logger.info("MockCamera initialized")


class BenchmarkPlayer:
    """Sends a random unit velocity to physics and the renderer on every tick."""

    def __init__(
        self,
        physics_pid: PID,
        renderer_pid: PID,
        player_id: int,
        rng: random.Random | None = None,
    ) -> None:
        self.physics_pid = physics_pid
        self.renderer_pid = renderer_pid
        self.player_id = player_id
        self.message_count = 0
        self._rng = rng if rng is not None else random.Random()

    def receive(self, ctx: Context) -> None:
        match ctx.message:
            case Initialized():
                ctx.engine.subscribe(ctx.pid)
                logger.debug("BenchmarkPlayer %d initialized", self.player_id)
            case Tick():
                velocity = Vec3(*((self._rng.random() - 0.5) * 2 for _ in range(3)))
                if velocity.length() > 0:
                    velocity = velocity.normalize()
                ctx.send(self.physics_pid, EventRigidBodyUpdate(pid=ctx.pid, velocity=velocity))
                ctx.send(
                    self.renderer_pid,
                    EventEntityRenderUpdate(
                        pid=ctx.pid,
                        entity_rigid_body=EntityRigidBody(
                            position=Vec3(),
                            velocity=velocity,
                            scale=Vec3(1.0, 1.0, 1.0),
                            rotation=Vec3(),
                        ),
                    ),
                )
                self.message_count += 1


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan if numerator == 0 else math.copysign(math.inf, numerator)
    return numerator / denominator


@dataclass
class BenchmarkStats:
    """Counts and timings of one benchmark run; times are monotonic seconds."""

    tick_rate: int
    num_players: int
    start_time: float = 0.0
    end_time: float = 0.0
    total_ticks: int = 0
    total_messages: int = 0

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def summary(self) -> str:
        """The results as printable text."""
        duration = self.duration
        lines = [
            "",
            "=== BENCHMARK RESULTS ===",
            f"Duration: {duration:.3f}s",
            f"Tick Rate: {self.tick_rate} Hz",
            f"Number of Players: {self.num_players}",
            f"Total Ticks: {self.total_ticks}",
            f"Total Messages: {self.total_messages}",
            f"Messages per second: {_ratio(self.total_messages, duration):.2f}",
            f"Ticks per second: {_ratio(self.total_ticks, duration):.2f}",
            f"Messages per tick: {_ratio(self.total_messages, self.total_ticks):.2f}",
            "========================",
        ]
        return "\n".join(lines) + "\n"


def run_benchmark(duration: float, tick_rate: int, players: int) -> BenchmarkStats:
    """Tick ``players`` simulated players at ``tick_rate`` Hz for ``duration`` seconds."""
    if tick_rate not in VALID_TICK_RATES:
        raise ValueError("Tick rate must be either 64 or 128")
    if players < 0:
        raise ValueError("number of players must not be negative")

    logger.info(
        "Starting benchmark with %d players, %d Hz tick rate, for %ss",
        players,
        tick_rate,
        duration,
    )
    engine = Engine()
    stats = BenchmarkStats(tick_rate=tick_rate, num_players=players, start_time=time.monotonic())

    physics = MockPhysics()
    renderer_pid = engine.spawn(MockRenderer, "renderer")
    physics_pid = engine.spawn(lambda: physics, "physics")
    camera_pid = engine.spawn(MockCamera, "camera")
    engine.send(physics_pid, _SetCameraPID(camera_pid))
    for player_id in range(players):
        engine.spawn(
            functools.partial(BenchmarkPlayer, physics_pid, renderer_pid, player_id),
            f"player_{player_id}",
        )
    engine.run_until_idle()

    interval = 1.0 / tick_rate
    end = stats.start_time + duration
    latest_tick = time.monotonic()
    next_tick = latest_tick + interval
    logger.info("Starting tick loop...")
    while True:
        now = time.monotonic()
        if now >= end:
            break
        if now < next_tick:
            time.sleep(min(next_tick, end) - now)
            continue
        delta_time = now - latest_tick
        latest_tick = now
        while next_tick <= now:
            next_tick += interval
        stats.total_ticks += 1
        engine.broadcast_event(Tick(delta_time=delta_time))
        engine.run_until_idle()

    stats.end_time = time.monotonic()
    stats.total_messages = physics.message_count + stats.total_ticks * players * 2
    return stats


_UNITS = {"ns": 1e-9, "us": 1e-6, "µs": 1e-6, "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0}
_PART = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)"


def _parse_duration(text: str) -> float:
    text = text.strip()
    try:
        return float(text)
    except ValueError:
        pass
    if not re.fullmatch(f"(?:{_PART})+", text):
        raise argparse.ArgumentTypeError(f"invalid duration: {text!r}")
    return sum(float(number) * _UNITS[unit] for number, unit in re.findall(_PART, text))


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="otto-bench", description="Measure actor message throughput."
    )
    parser.add_argument(
        "-duration", "--duration", type=_parse_duration, default=10.0,
        help="benchmark duration, e.g. 10s or 500ms",
    )
    parser.add_argument(
        "-tickrate", "--tickrate", type=int, default=64, help="tick rate in Hz (64 or 128)"
    )
    parser.add_argument(
        "-players", "--players", type=int, default=100, help="number of players to simulate"
    )
    args = parser.parse_args(argv)

    try:
        stats = run_benchmark(args.duration, args.tickrate, args.players)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(stats.summary(), end="")
    return 0