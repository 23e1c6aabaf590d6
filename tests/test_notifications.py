import pytest

from geomdemos.model.notifications import Animated, Subject


class Recorder:
    def __init__(self, name, log):
        self.name = name
        self.log = log

    def advance(self, delta):
        self.log.append((self.name, delta))


def test_notify_in_registration_order():
    log = []
    subject = Subject()
    a, b, c = Recorder("a", log), Recorder("b", log), Recorder("c", log)
    for obj in (b, a, c):
        subject.register(obj)
    subject.notify(0.25)
    assert log == [("b", 0.25), ("a", 0.25), ("c", 0.25)]


def test_register_is_idempotent():
    log = []
    subject = Subject()
    a = Recorder("a", log)
    subject.register(a)
    subject.register(a)
    assert len(subject) == 1
    subject.notify(1.0)
    assert log == [("a", 1.0)]


def test_unregister_stops_delivery():
    log = []
    subject = Subject()
    a, b = Recorder("a", log), Recorder("b", log)
    subject.register(a)
    subject.register(b)
    subject.unregister(a)
    subject.notify(0.5)
    assert log == [("b", 0.5)]
    assert a not in subject
    assert b in subject


def test_unregister_absent_is_noop():
    subject = Subject()
    subject.unregister(Recorder("a", []))
    assert len(subject) == 0


def test_notify_without_subscribers():
    Subject().notify(0.1)


def test_subscriber_may_unregister_itself():
    log = []
    subject = Subject()

    class OneShot(Recorder):
        def advance(self, delta):
            super().advance(delta)
            subject.unregister(self)

    once = OneShot("once", log)
    always = Recorder("always", log)
    subject.register(once)
    subject.register(always)
    subject.notify(1.0)
    subject.notify(2.0)
    assert log == [("once", 1.0), ("always", 1.0), ("always", 2.0)]


def test_register_rejects_objects_without_advance():
    with pytest.raises(TypeError):
        Subject().register(object())


def test_recorder_satisfies_protocol():
    assert isinstance(Recorder("a", []), Animated)


def test_unhashable_subscribers_are_accepted():
    from dataclasses import dataclass, field

    @dataclass
    class Counter:
        ticks: list = field(default_factory=list)

        def advance(self, delta):
            self.ticks.append(delta)

    subject = Subject()
    a, b = Counter(), Counter()
    # equal by value but distinct subscribers
    assert a == b
    subject.register(a)
    subject.register(b)
    subject.register(a)
    assert len(subject) == 2
    subject.notify(0.5)
    assert a.ticks == [0.5]
    assert b.ticks == [0.5]

    subject.unregister(b)
    assert a in subject
    assert b not in subject
