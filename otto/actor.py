"""A small deterministic actor engine.

Messages are queued and delivered one at a time, in the order they were
sent, when the engine is run. Every spawned actor first receives
:class:`Initialized`.
"""

from __future__ import annotations

import itertools
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol


@dataclass(frozen=True)
class PID:
    """Address of an actor."""

    address: str
    id: str

    def __str__(self) -> str:
        return f"{self.address}/{self.id}"


@dataclass(frozen=True)
class Initialized:
    """Delivered to each actor once, before any other message."""


class Receiver(Protocol):
    def receive(self, ctx: Context) -> None: ...


Producer = Callable[[], Receiver]


@dataclass(frozen=True)
class DeadLetter:
    """A message addressed to an actor that does not exist."""

    target: PID
    message: Any
    sender: Optional[PID]


@dataclass(frozen=True)
class _Envelope:
    target: PID
    message: Any
    sender: Optional[PID]


@dataclass
class _Process:
    receiver: Receiver
    parent: Optional[PID]


class Context:
    """What an actor sees while handling one message."""

    def __init__(
        self,
        engine: Engine,
        pid: PID,
        message: Any,
        sender: Optional[PID],
        parent: Optional[PID],
    ) -> None:
        self._engine = engine
        self._pid = pid
        self._message = message
        self._sender = sender
        self._parent = parent

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def pid(self) -> PID:
        return self._pid

    @property
    def message(self) -> Any:
        return self._message

    @property
    def sender(self) -> Optional[PID]:
        return self._sender

    @property
    def parent(self) -> Optional[PID]:
        return self._parent

    def send(self, pid: PID, message: Any) -> None:
        """Send ``message`` to ``pid`` with this actor as the sender."""
        self._engine._post(pid, message, self._pid)

    def respond(self, message: Any) -> None:
        """Reply to the sender of the current message."""
        if self._sender is None:
            raise RuntimeError("the current message has no sender to respond to")
        self._engine._post(self._sender, message, self._pid)

    def forward(self, pid: PID) -> None:
        """Pass the current message on to ``pid``, keeping its sender."""
        self._engine._post(pid, self._message, self._sender)

    def spawn_child(self, producer: Producer, name: str) -> PID:
        """Spawn an actor whose parent is this actor."""
        return self._engine._spawn(producer, name, self._pid)


class Engine:
    """Owns actors, their mailboxes and the event-stream subscribers."""

    def __init__(self, address: str = "local") -> None:
        self._address = address
        self._actors: dict[PID, _Process] = {}
        self._subscribers: list[PID] = []
        self._queue: deque[_Envelope] = deque()
        self._responses: dict[PID, list[Any]] = {}
        self._ids = itertools.count(1)
        self.dead_letters: list[DeadLetter] = []

    def spawn(self, producer: Producer, name: str) -> PID:
        """Create an actor from ``producer`` and queue its Initialized message."""
        return self._spawn(producer, name, None)

    def _spawn(self, producer: Producer, name: str, parent: Optional[PID]) -> PID:
        base = name if parent is None else f"{parent.id}/{name}"
        pid = PID(self._address, f"{base}/{next(self._ids)}")
        self._actors[pid] = _Process(producer(), parent)
        self._queue.append(_Envelope(pid, Initialized(), None))
        return pid

    def send(self, pid: PID, message: Any) -> None:
        """Queue ``message`` for ``pid`` with no sender."""
        self._post(pid, message, None)

    def subscribe(self, pid: PID) -> None:
        """Make ``pid`` receive broadcast events."""
        if pid not in self._subscribers:
            self._subscribers.append(pid)

    def unsubscribe(self, pid: PID) -> None:
        """Stop ``pid`` receiving broadcast events."""
        if pid in self._subscribers:
            self._subscribers.remove(pid)

    def broadcast_event(self, message: Any) -> None:
        """Queue ``message`` for every subscriber."""
        for pid in list(self._subscribers):
            self._post(pid, message, None)

    def request(self, pid: PID, message: Any, timeout: float) -> Any:
        """Send ``message`` and run the engine until ``pid`` responds.

        Raises TimeoutError when no response arrives before the queue runs
        dry or ``timeout`` seconds have passed.
        """
        reply_pid = PID(self._address, f"response/{next(self._ids)}")
        self._responses[reply_pid] = []
        deadline = time.monotonic() + timeout
        try:
            self._post(pid, message, reply_pid)
            while not self._responses[reply_pid]:
                if not self._queue or time.monotonic() > deadline:
                    raise TimeoutError(f"no response from {pid} to {message!r}")
                self._step()
            return self._responses[reply_pid][0]
        finally:
            del self._responses[reply_pid]

    def run_until_idle(self) -> int:
        """Deliver queued messages until none are left; return how many were delivered."""
        delivered = 0
        while self._queue:
            self._step()
            delivered += 1
        return delivered

    @property
    def pending(self) -> int:
        """Number of queued messages."""
        return len(self._queue)

    def _post(self, pid: PID, message: Any, sender: Optional[PID]) -> None:
        slot = self._responses.get(pid)
        if slot is not None:
            slot.append(message)
            return
        self._queue.append(_Envelope(pid, message, sender))

    def _step(self) -> None:
        envelope = self._queue.popleft()
        process = self._actors.get(envelope.target)
        if process is None:
            self.dead_letters.append(
                DeadLetter(envelope.target, envelope.message, envelope.sender)
            )
            return
        ctx = Context(self, envelope.target, envelope.message, envelope.sender, process.parent)
        process.receiver.receive(ctx)