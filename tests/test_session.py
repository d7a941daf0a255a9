import random

from collect import USER_MESSAGE
from conftest import NOW, failed, ok, submission_dict, ts
from session import SnapshotStore, cached_sample, run_lookup


def test_newer_result_wins_over_late_older_one():
    store = SnapshotStore()
    older = store.begin()
    newer = store.begin()

    assert store.commit(newer, "newer")
    assert not store.commit(older, "older")
    assert store.current == (newer, "newer", None)


def test_results_in_order_replace_each_other():
    store = SnapshotStore()
    first = store.begin()
    assert store.commit(first, "first")
    second = store.begin()
    assert store.commit(second, "second")
    assert store.snapshot == "second"


def test_failure_clears_snapshot():
    store = SnapshotStore()
    store.commit(store.begin(), "shown")
    store.fail(store.begin(), "boom")
    assert store.snapshot is None
    assert store.error == "boom"


def test_run_lookup(fake_client):
    client = fake_client({
        "user.info": ok([{"handle": "jiangly", "rating": 3900}]),
        "user.status": ok([
            submission_dict(1, "A", "OK", tags=["dp"], rating=1200, when=ts(2024, 6, 30)),
            submission_dict(1, "B", "WRONG_ANSWER", tags=["graphs"], when=ts(2024, 6, 29)),
        ]),
        "user.rating": ok([]),
    })
    store = SnapshotStore()
    token, analysis = run_lookup(store, "jiangly", client, now=NOW)

    assert store.current == (token, analysis, None)
    assert analysis.user.rating == 3900
    assert analysis.weak_tags == ("graphs", "dp")
    assert analysis.solved == frozenset({"1-A"})
    assert analysis.max_streak == 2
    assert analysis.ratings == ()


def test_run_lookup_zero_submissions(fake_client):
    client = fake_client({
        "user.info": ok([{"handle": "fresh"}]),
        "user.status": ok([]),
        "user.rating": ok([]),
    })
    store = SnapshotStore()
    _, analysis = run_lookup(store, "fresh", client, now=NOW)

    assert store.error is None
    assert analysis.tag_stats == ()
    assert analysis.window_total == 0
    assert analysis.weak_tags == ()


def test_run_lookup_unknown_handle(fake_client):
    client = fake_client({
        "user.info": failed("handles: User with handle ghost not found"),
        "user.status": failed("handle: User with handle ghost not found"),
        "user.rating": failed("handle: User with handle ghost not found"),
    })
    store = SnapshotStore()
    _, analysis = run_lookup(store, "ghost", client, now=NOW)

    assert analysis is None
    assert store.error == USER_MESSAGE


def test_run_lookup_blank_handle(fake_client):
    client = fake_client({})
    store = SnapshotStore()
    run_lookup(store, "  ", client)

    assert store.error == "Please enter a handle"
    assert client.session.calls == []


def test_run_lookup_wrong_shape_profile(fake_client):
    client = fake_client({
        "user.info": ok([{}]),
        "user.status": ok([]),
        "user.rating": ok([]),
    })
    store = SnapshotStore()
    _, analysis = run_lookup(store, "broken", client, now=NOW)

    assert analysis is None
    assert store.error == USER_MESSAGE


def test_run_lookup_wrong_shape_submissions(fake_client):
    client = fake_client({
        "user.info": ok([{"handle": "partial"}]),
        "user.status": ok([{"id": 1, "verdict": "OK"}]),
        "user.rating": ok([]),
    })
    store = SnapshotStore()
    _, analysis = run_lookup(store, "partial", client, now=NOW)

    assert store.error is None
    assert analysis.submissions == ()
    assert analysis.warnings == ("Submission history is unavailable right now.",)


def test_cached_sample_reused_until_key_changes():
    rng = random.Random(3)
    state = {}
    calls = []

    def compute():
        calls.append(1)
        sample = list(range(20))
        rng.shuffle(sample)
        return sample[:10]

    first = cached_sample(state, "picks", (1, "all", "nearby"), False, compute)
    # unrelated reruns keep the same sample
    assert cached_sample(state, "picks", (1, "all", "nearby"), False, compute) == first
    assert len(calls) == 1

    cached_sample(state, "picks", (1, "dp", "nearby"), False, compute)
    cached_sample(state, "picks", (2, "dp", "nearby"), False, compute)
    assert len(calls) == 3


def test_cached_sample_refresh_rerolls():
    state = {}
    values = iter(["first", "second"])

    assert cached_sample(state, "picks", "key", False, lambda: next(values)) == "first"
    assert cached_sample(state, "picks", "key", True, lambda: next(values)) == "second"
    assert state["picks"] == ("key", "second")
