import itertools

import pytest

from slopekit.states import Event, EventKind, State, StateManager


class Recorder(State):
    def __init__(self, name, log):
        self.name = name
        self.log = log

    def enter(self):
        self.log.append((self.name, "enter"))

    def exit(self):
        self.log.append((self.name, "exit"))

    def loop(self, time_step):
        self.log.append((self.name, "loop", time_step))

    def keyb(self, key, release, x, y):
        self.log.append((self.name, "keyb", key, release, x, y))

    def mouse(self, button, pressed, x, y):
        self.log.append((self.name, "mouse", button, pressed, x, y))

    def motion(self, dx, dy):
        self.log.append((self.name, "motion", dx, dy))

    def jaxis(self, axis, value):
        self.log.append((self.name, "jaxis", axis, value))

    def jbutt(self, button, pressed):
        self.log.append((self.name, "jbutt", button, pressed))

    def text_entered(self, text):
        self.log.append((self.name, "text", text))


def frames(manager, *batches):
    """Yield each batch on successive frames, then request quit."""
    it = iter(batches)

    def poll():
        try:
            return next(it)
        except StopIteration:
            manager.request_quit()
            return []

    return poll


def calls(log, name, what):
    return [entry for entry in log if entry[0] == name and entry[1] == what]


def test_enter_loop_exit_order():
    log = []
    manager = StateManager(clock=itertools.count().__next__)
    state = Recorder("a", log)
    manager.run(state, frames(manager))
    assert log[0] == ("a", "enter")
    assert log[-1] == ("a", "exit")
    assert manager.current_state() is None
    assert manager.previous_state() is state


def test_transition_to_next_state():
    log = []
    manager = StateManager(clock=itertools.count().__next__)
    a, b = Recorder("a", log), Recorder("b", log)
    a.loop = lambda step: manager.request_enter_state(b)
    manager.run(a, frames(manager, [], []))
    assert log.index(("a", "exit")) < log.index(("b", "enter"))
    assert manager.previous_state() is b
    assert log[-1] == ("b", "exit")


def test_events_ignored_while_transition_pending():
    log = []
    manager = StateManager(clock=itertools.count().__next__)
    a, b = Recorder("a", log), Recorder("b", log)
    manager.request_enter_state(b)
    manager.run(a, frames(manager, [Event(EventKind.TEXT_ENTERED, text="q")]))
    assert manager.previous_state() is b
    assert calls(log, "a", "text") == []
    assert calls(log, "b", "text") == []


def test_key_events_use_cursor_position():
    log = []
    manager = StateManager(clock=itertools.count().__next__)
    events = [
        Event(EventKind.MOUSE_MOVED, x=10, y=20),
        Event(EventKind.KEY_PRESSED, key="A"),
        Event(EventKind.KEY_RELEASED, key="A"),
    ]
    manager.run(Recorder("a", log), frames(manager, events))
    assert calls(log, "a", "keyb") == [
        ("a", "keyb", "A", False, 10, 20),
        ("a", "keyb", "A", True, 10, 20),
    ]


def test_mouse_motion_reports_delta():
    log = []
    manager = StateManager(clock=itertools.count().__next__)
    events = [Event(EventKind.MOUSE_MOVED, x=5, y=7), Event(EventKind.MOUSE_MOVED, x=8, y=3)]
    manager.run(Recorder("a", log), frames(manager, events))
    assert calls(log, "a", "motion") == [("a", "motion", 5, 7), ("a", "motion", 3, -4)]
    assert (manager.cursor_pos.x, manager.cursor_pos.y) == (8, 3)


def test_mouse_and_joystick_buttons():
    log = []
    manager = StateManager(clock=itertools.count().__next__)
    events = [
        Event(EventKind.MOUSE_BUTTON_PRESSED, button=1, x=2, y=3),
        Event(EventKind.MOUSE_BUTTON_RELEASED, button=1, x=4, y=5),
        Event(EventKind.JOYSTICK_BUTTON_PRESSED, button=2),
        Event(EventKind.JOYSTICK_BUTTON_RELEASED, button=2),
    ]
    manager.run(Recorder("a", log), frames(manager, events))
    assert calls(log, "a", "mouse") == [
        ("a", "mouse", 1, True, 2, 3),
        ("a", "mouse", 1, False, 4, 5),
    ]
    assert calls(log, "a", "jbutt") == [("a", "jbutt", 2, True), ("a", "jbutt", 2, False)]


@pytest.mark.parametrize("axis, expected", [(0, 0), (1, 1), (4, 1)])
def test_joystick_axis_mapping(axis, expected):
    log = []
    manager = StateManager(clock=itertools.count().__next__)
    events = [Event(EventKind.JOYSTICK_MOVED, axis=axis, position=50.0)]
    manager.run(Recorder("a", log), frames(manager, events))
    assert calls(log, "a", "jaxis") == [("a", "jaxis", expected, 0.5)]


def test_closed_event_quits():
    log = []
    manager = StateManager(clock=itertools.count().__next__)
    never_ending = lambda: [Event(EventKind.CLOSED)]
    manager.run(Recorder("a", log), never_ending)
    assert len(calls(log, "a", "loop")) == 1


def test_resize_only_on_change():
    seen = []
    manager = StateManager(
        clock=itertools.count().__next__,
        on_resize=lambda w, h: seen.append((w, h)),
        resolution=(800, 600),
    )
    events = [
        Event(EventKind.RESIZED, width=800, height=600),
        Event(EventKind.RESIZED, width=1024, height=768),
    ]
    manager.run(Recorder("a", []), frames(manager, events))
    assert seen == [(1024, 768)]
    assert manager.resolution == (1024, 768)


def test_time_step_has_lower_bound():
    log = []
    manager = StateManager(clock=lambda: 5.0)
    manager.run(Recorder("a", log), frames(manager))
    steps = [entry[2] for entry in calls(log, "a", "loop")]
    assert steps and all(step == 0.0001 for step in steps)


def test_time_step_from_clock():
    log = []
    manager = StateManager(clock=itertools.count(start=0, step=2).__next__)
    manager.run(Recorder("a", log), frames(manager, []))
    steps = [entry[2] for entry in calls(log, "a", "loop")]
    assert steps == [2, 2]
    assert manager.time_step == 2