import threading

from core.broadcaster import Broadcaster
from core.events import EventKind, ProgressEvent


def _event(kind=EventKind.REPO_FETCH_STARTED, **payload):
    return ProgressEvent(kind=kind, payload=payload)


def test_subscribe_returns_unique_ids():
    b = Broadcaster()
    ids = {b.subscribe(lambda e: None) for _ in range(5)}
    assert len(ids) == 5
    assert b.observer_count == 5


def test_publish_without_target_reaches_every_observer():
    b = Broadcaster()
    got_a, got_b = [], []
    b.subscribe(got_a.append)
    b.subscribe(got_b.append)

    ev = _event(owner="octocat")
    b.publish(ev)

    assert got_a == [ev]
    assert got_b == [ev]


def test_publish_with_target_reaches_only_that_observer():
    b = Broadcaster()
    got_a, got_b = [], []
    a_id = b.subscribe(got_a.append)
    b.subscribe(got_b.append)

    b.publish(_event(), target_id=a_id)

    assert len(got_a) == 1
    assert got_b == []


def test_publish_to_unknown_target_is_dropped():
    b = Broadcaster()
    got = []
    b.subscribe(got.append)

    b.publish(_event(), target_id="missing")

    assert got == []


def test_unsubscribe_stops_delivery_and_absent_id_is_noop():
    b = Broadcaster()
    got = []
    obs = b.subscribe(got.append)

    b.unsubscribe(obs)
    b.unsubscribe(obs)
    b.unsubscribe("never-registered")
    b.publish(_event())

    assert got == []
    assert b.observer_count == 0


def test_failing_sink_does_not_block_others_or_raise():
    b = Broadcaster()
    got = []

    def broken(event):
        raise RuntimeError("socket closed")

    b.subscribe(broken)
    b.subscribe(got.append)

    b.publish(_event())

    assert len(got) == 1


def test_sink_may_unsubscribe_itself_during_delivery():
    b = Broadcaster()
    got = []
    ids = {}

    def once(event):
        got.append(event)
        b.unsubscribe(ids["me"])

    ids["me"] = b.subscribe(once)
    b.publish(_event())
    b.publish(_event())

    assert len(got) == 1


def test_emit_builds_event_with_timestamp():
    b = Broadcaster()
    got = []
    b.subscribe(got.append)

    ev = b.emit(EventKind.FILE_FETCH_STARTED, {"path": "a.txt"})

    assert got == [ev]
    assert ev.name == "file_fetch_started"
    data = ev.data()
    assert data["path"] == "a.txt"
    assert data["timestamp"] == ev.timestamp


def test_registry_survives_concurrent_subscribe_unsubscribe_and_publish():
    b = Broadcaster()
    steady = []
    b.subscribe(steady.append)
    errors = []
    published = 500

    def churn():
        try:
            for _ in range(published):
                b.unsubscribe(b.subscribe(lambda e: None))
        except Exception as e:
            errors.append(e)

    def publish():
        try:
            for i in range(published):
                b.emit(EventKind.FILE_FETCH_STARTED, {"path": f"f{i}"})
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=churn) for _ in range(4)]
    threads.append(threading.Thread(target=publish))
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert [e.payload["path"] for e in steady] == [f"f{i}" for i in range(published)]
    assert b.observer_count == 1
