"""Input state, input contexts and the actor that dispatches input on each tick."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Protocol, runtime_checkable

from otto.actor import PID, Context, Initialized
from otto.system import Tick
from otto.vector import Vec2

logger = logging.getLogger(__name__)


class Key(IntEnum):
    """Keyboard keys the engine knows about."""

    W = 0
    S = 1
    A = 2
    D = 3
    SPACE = 4
    LEFT_SHIFT = 5
    EQUAL = 6
    MINUS = 7


class MouseButton(IntEnum):
    """Mouse buttons."""

    LEFT = 0
    RIGHT = 1
    MIDDLE = 2


@dataclass
class InputState:
    """Snapshot of keyboard and mouse state for one frame."""

    key_states: dict[Key, bool] = field(default_factory=dict)
    mouse_button_states: dict[MouseButton, bool] = field(default_factory=dict)
    mouse_position: Vec2 = Vec2()
    mouse_delta: Vec2 = Vec2()
    mouse_wheel: float = 0.0
    want_capture_keyboard: bool = False
    want_capture_mouse: bool = False

    def is_key_pressed(self, key: Key) -> bool:
        return self.key_states.get(key, False)

    def is_key_released(self, key: Key) -> bool:
        return not self.key_states.get(key, False)

    def is_mouse_button_pressed(self, button: MouseButton) -> bool:
        return self.mouse_button_states.get(button, False)

    def is_mouse_button_released(self, button: MouseButton) -> bool:
        return not self.mouse_button_states.get(button, False)


@runtime_checkable
class InputProvider(Protocol):
    """Source of input state, refreshed once per tick."""

    input_state: InputState

    def update(self) -> None: ...

    def is_valid(self) -> bool: ...


class ManualInputProvider:
    """Provider whose state is set directly by the caller."""

    def __init__(self, input_state: InputState | None = None) -> None:
        self.input_state = input_state if input_state is not None else InputState()
        self._valid = False

    def update(self) -> None:
        """Mark the current state as the one to use for this tick."""
        self._valid = True

    def is_valid(self) -> bool:
        """True once the provider has been updated."""
        return self._valid


@runtime_checkable
class InputContext(Protocol):
    """Turns input state into something an actor cares about."""

    pid: PID

    def process(self, state: InputState, capture_keyboard: bool, capture_mouse: bool) -> bool:
        """Read ``state``; return True when there was input."""
        ...


@dataclass(frozen=True)
class EventInput:
    """Delivered to a context's owner after the context saw input."""

    context: InputContext


@dataclass(frozen=True)
class EventRegisterInputs:
    """Registers contexts with the input actor."""

    contexts: tuple[InputContext, ...] = ()


def register_inputs(ctx: Context, input_pid: PID, *args: InputContext) -> None:
    """Register ``args`` with the input actor at ``input_pid``."""
    ctx.send(input_pid, EventRegisterInputs(contexts=tuple(args)))


class InputActor:
    """Processes every registered context on each tick."""

    def __init__(self, provider: InputProvider | None = None) -> None:
        self.contexts: dict[PID, list[InputContext]] = {}
        self.input_states: dict[PID, list[bool]] = {}
        self.provider: InputProvider = provider if provider is not None else ManualInputProvider()

    def receive(self, ctx: Context) -> None:
        match ctx.message:
            case Initialized():
                ctx.engine.subscribe(ctx.pid)
            case Tick():
                self.process_all_input(ctx)
            case EventRegisterInputs() as msg:
                for context in msg.contexts:
                    self.contexts.setdefault(context.pid, []).append(context)
                    self.input_states.setdefault(context.pid, []).append(False)

    def process_all_input(self, ctx: Context) -> None:
        """Run every context and send input events to their owners.

        An event is sent while a context reports input, and once more on the
        tick its input stops.
        """
        try:
            self.provider.update()
        except Exception as exc:  # a faulty provider skips this tick only
            logger.warning("input provider update error: %s", exc)
            return

        state = self.provider.input_state
        for pid, contexts in self.contexts.items():
            states = self.input_states.setdefault(pid, [False] * len(contexts))
            for idx, context in enumerate(contexts):
                has_input = context.process(
                    state, state.want_capture_keyboard, state.want_capture_mouse
                )
                if has_input or states[idx]:
                    ctx.send(pid, EventInput(context=context))
                states[idx] = has_input