import pytest

from otto.actor import PID, Context, DeadLetter, Engine, Initialized


class Recorder:
    def __init__(self):
        self.seen = []
        self.senders = []
        self.parents = []

    def receive(self, ctx):
        self.seen.append(ctx.message)
        self.senders.append(ctx.sender)
        self.parents.append(ctx.parent)


class Echo:
    def receive(self, ctx):
        if isinstance(ctx.message, str):
            ctx.respond(ctx.message.upper())


class Silent:
    def receive(self, ctx):
        pass


class Relay:
    def __init__(self, target):
        self.target = target

    def receive(self, ctx):
        if isinstance(ctx.message, str):
            ctx.send(self.target, ctx.message + "!")


class Forwarder:
    def __init__(self, target):
        self.target = target

    def receive(self, ctx):
        if not isinstance(ctx.message, Initialized):
            ctx.forward(self.target)


class Subscriber(Recorder):
    def receive(self, ctx):
        super().receive(ctx)
        if isinstance(ctx.message, Initialized):
            ctx.engine.subscribe(ctx.pid)


def test_initialized_is_first_message():
    engine = Engine()
    rec = Recorder()
    pid = engine.spawn(lambda: rec, "rec")
    engine.send(pid, "hello")
    engine.run_until_idle()
    assert rec.seen == [Initialized(), "hello"]


def test_messages_delivered_in_order():
    engine = Engine()
    rec = Recorder()
    pid = engine.spawn(lambda: rec, "rec")
    for item in range(5):
        engine.send(pid, item)
    delivered = engine.run_until_idle()
    assert rec.seen[1:] == [0, 1, 2, 3, 4]
    assert delivered == 6
    assert engine.pending == 0


def test_send_from_actor_sets_sender():
    engine = Engine()
    rec = Recorder()
    target = engine.spawn(lambda: rec, "rec")
    relay = engine.spawn(lambda: Relay(target), "relay")
    engine.send(relay, "ping")
    engine.run_until_idle()
    assert rec.seen[-1] == "ping!"
    assert rec.senders[-1] == relay


def test_request_returns_response():
    engine = Engine()
    pid = engine.spawn(Echo, "echo")
    assert engine.request(pid, "abc", 1.0) == "ABC"


def test_request_without_response_times_out():
    engine = Engine()
    pid = engine.spawn(Silent, "silent")
    with pytest.raises(TimeoutError):
        engine.request(pid, "abc", 1.0)


def test_respond_without_sender_raises():
    engine = Engine()
    pid = engine.spawn(Echo, "echo")
    engine.send(pid, "abc")
    with pytest.raises(RuntimeError):
        engine.run_until_idle()


def test_broadcast_reaches_only_subscribers():
    engine = Engine()
    sub = Subscriber()
    other = Recorder()
    engine.spawn(lambda: sub, "sub")
    engine.spawn(lambda: other, "other")
    engine.run_until_idle()
    engine.broadcast_event("tick")
    engine.run_until_idle()
    assert sub.seen == [Initialized(), "tick"]
    assert other.seen == [Initialized()]


def test_unsubscribe_stops_broadcasts():
    engine = Engine()
    sub = Subscriber()
    pid = engine.spawn(lambda: sub, "sub")
    engine.run_until_idle()
    engine.unsubscribe(pid)
    engine.broadcast_event("tick")
    engine.run_until_idle()
    assert "tick" not in sub.seen


def test_forward_keeps_message_and_sender():
    engine = Engine()
    rec = Recorder()
    target = engine.spawn(lambda: rec, "rec")
    fwd = engine.spawn(lambda: Forwarder(target), "fwd")
    relay = engine.spawn(lambda: Relay(fwd), "relay")
    engine.send(relay, "x")
    engine.run_until_idle()
    assert rec.seen[-1] == "x!"
    assert rec.senders[-1] == relay


def test_spawn_child_has_parent():
    engine = Engine()
    child = Recorder()
    spawned = []

    class Parent:
        def receive(self, ctx):
            if isinstance(ctx.message, Initialized):
                spawned.append(ctx.spawn_child(lambda: child, "kid"))

    parent_pid = engine.spawn(Parent, "parent")
    engine.run_until_idle()
    assert len(spawned) == 1
    assert spawned[0].id.startswith(parent_pid.id + "/kid/")
    assert child.parents == [parent_pid]


def test_unknown_pid_goes_to_dead_letters():
    engine = Engine()
    ghost = PID("local", "ghost/1")
    engine.send(ghost, "boo")
    engine.run_until_idle()
    assert engine.dead_letters == [DeadLetter(ghost, "boo", None)]


def test_spawned_pids_are_distinct():
    engine = Engine()
    a = engine.spawn(Silent, "same")
    b = engine.spawn(Silent, "same")
    assert a != b
    assert a.address == b.address == "local"


def test_context_exposes_its_values():
    engine = Engine()
    pid = PID("local", "x/1")
    ctx = Context(engine, pid, "m", None, None)
    assert (ctx.engine, ctx.pid, ctx.message, ctx.sender) == (engine, pid, "m", None)