"""Game states and the manager that runs them from an event source."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from slopekit.vectors import Vector2

MIN_TIME_STEP = 0.0001


class EventKind(enum.Enum):
    KEY_PRESSED = enum.auto()
    KEY_RELEASED = enum.auto()
    TEXT_ENTERED = enum.auto()
    MOUSE_BUTTON_PRESSED = enum.auto()
    MOUSE_BUTTON_RELEASED = enum.auto()
    MOUSE_MOVED = enum.auto()
    JOYSTICK_MOVED = enum.auto()
    JOYSTICK_BUTTON_PRESSED = enum.auto()
    JOYSTICK_BUTTON_RELEASED = enum.auto()
    RESIZED = enum.auto()
    CLOSED = enum.auto()


@dataclass
class Event:
    """An input or window event; only the fields its kind uses matter."""

    kind: EventKind
    key: object = None
    text: str = ""
    button: int = 0
    x: int = 0
    y: int = 0
    axis: int = 0
    position: float = 0.0
    width: int = 0
    height: int = 0


@dataclass
class InputStatus:
    """What the default hooks of a state have seen so far."""

    active: bool = False
    elapsed: float = 0.0
    keys_held: set = field(default_factory=set)
    mouse_buttons: set = field(default_factory=set)
    joystick_buttons: set = field(default_factory=set)
    axes: dict = field(default_factory=dict)
    motion: Vector2 = field(default_factory=lambda: Vector2(0, 0))
    typed: str = ""


class State:
    """Base class for a screen of the game.

    The default hooks only keep track of the input they receive in
    :attr:`input`; subclasses override them to react.
    """

    @property
    def input(self) -> InputStatus:
        status = getattr(self, "_input_status", None)
        if status is None:
            status = InputStatus()
            self._input_status = status
        return status

    def enter(self) -> None:
        self.input.active = True

    def loop(self, time_step: float) -> None:
        self.input.elapsed += time_step

    def keyb(self, key, release: bool, x: int, y: int) -> None:
        if release:
            self.input.keys_held.discard(key)
        else:
            self.input.keys_held.add(key)

    def mouse(self, button: int, pressed: bool, x: int, y: int) -> None:
        if pressed:
            self.input.mouse_buttons.add(button)
        else:
            self.input.mouse_buttons.discard(button)

    def motion(self, dx: int, dy: int) -> None:
        total = self.input.motion
        self.input.motion = Vector2(total.x + dx, total.y + dy)

    def jaxis(self, axis: int, value: float) -> None:
        self.input.axes[axis] = value

    def jbutt(self, button: int, pressed: bool) -> None:
        if pressed:
            self.input.joystick_buttons.add(button)
        else:
            self.input.joystick_buttons.discard(button)

    def text_entered(self, text: str) -> None:
        self.input.typed += text

    def exit(self) -> None:
        self.input.active = False


class StateManager:
    """Runs one state at a time, dispatching events and calling its loop."""

    def __init__(
        self,
        clock: Callable[[], float] = time.perf_counter,
        on_resize: Optional[Callable[[int, int], None]] = None,
        resolution: tuple[int, int] = (0, 0),
    ) -> None:
        self._clock = clock
        self._on_resize = on_resize
        self.resolution = resolution
        self.cursor_pos = Vector2(0, 0)
        self.time_step = 0.0
        self._previous: Optional[State] = None
        self._current: Optional[State] = None
        self._next: Optional[State] = None
        self._quit = False
        self._last_tick = clock()

    def request_enter_state(self, state: State) -> None:
        self._next = state

    def request_quit(self) -> None:
        self._quit = True

    def previous_state(self) -> Optional[State]:
        return self._previous

    def current_state(self) -> Optional[State]:
        return self._current

    def run(
        self, entrance_state: State, poll_events: Callable[[], Iterable[Event]]
    ) -> None:
        """Run states until a quit is requested.

        ``poll_events`` is called once per frame and yields that frame's events.
        """
        self._current = entrance_state
        self._current.enter()
        while not self._quit:
            for event in poll_events():
                if self._next is None:
                    self._dispatch(event)
            if self._next is not None:
                self._enter_next_state()
            self._call_loop()
        self._current.exit()
        self._previous = self._current
        self._current = None

    def _enter_next_state(self) -> None:
        self._current.exit()
        self._previous = self._current
        self._current = self._next
        self._next = None
        self._current.enter()

    def _call_loop(self) -> None:
        now = self._clock()
        self.time_step = max(MIN_TIME_STEP, now - self._last_tick)
        self._last_tick = now
        self._current.loop(self.time_step)

    def _dispatch(self, event: Event) -> None:
        state = self._current
        kind = event.kind
        if kind is EventKind.KEY_PRESSED:
            state.keyb(event.key, False, self.cursor_pos.x, self.cursor_pos.y)
        elif kind is EventKind.KEY_RELEASED:
            state.keyb(event.key, True, self.cursor_pos.x, self.cursor_pos.y)
        elif kind is EventKind.TEXT_ENTERED:
            state.text_entered(event.text)
        elif kind in (EventKind.MOUSE_BUTTON_PRESSED, EventKind.MOUSE_BUTTON_RELEASED):
            state.mouse(
                event.button, kind is EventKind.MOUSE_BUTTON_PRESSED, event.x, event.y
            )
        elif kind is EventKind.MOUSE_MOVED:
            old = Vector2(self.cursor_pos.x, self.cursor_pos.y)
            self.cursor_pos = Vector2(event.x, event.y)
            state.motion(event.x - old.x, event.y - old.y)
        elif kind is EventKind.JOYSTICK_MOVED:
            state.jaxis(0 if event.axis == 0 else 1, event.position / 100.0)
        elif kind in (
            EventKind.JOYSTICK_BUTTON_PRESSED,
            EventKind.JOYSTICK_BUTTON_RELEASED,
        ):
            state.jbutt(event.button, kind is EventKind.JOYSTICK_BUTTON_PRESSED)
        elif kind is EventKind.RESIZED:
            size = (event.width, event.height)
            if size != self.resolution:
                self.resolution = size
                if self._on_resize is not None:
                    self._on_resize(event.width, event.height)
        elif kind is EventKind.CLOSED:
            self._quit = True