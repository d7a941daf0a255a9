import pytest

from collect import USER_MESSAGE
from compare import ComparisonError, acceptance_percent, compare_handles, format_value, handle_stats, metric
from conftest import failed, ok, submission_dict
from structs import Submission, UserInfo


def handle_a_submissions():
    # 10 submissions, 4 accepted across 3 distinct problems
    rows = [
        (1, "A", "OK"), (1, "A", "OK"), (1, "B", "OK"), (2, "C", "OK"),
        (1, "B", "WRONG_ANSWER"), (2, "C", "WRONG_ANSWER"), (2, "D", "WRONG_ANSWER"),
        (2, "D", "TIME_LIMIT_EXCEEDED"), (3, "A", "RUNTIME_ERROR"), (3, "B", "COMPILATION_ERROR"),
    ]
    return [submission_dict(c, i, v) for c, i, v in rows]


def test_handle_stats_fixture():
    stats = handle_stats(UserInfo(handle="a"), [Submission(**s) for s in handle_a_submissions()])
    assert stats.solved_count == 3
    assert stats.total_submissions == 10
    assert stats.acceptance_rate == 30


def test_handle_stats_without_submissions():
    stats = handle_stats(UserInfo(handle="b"), [])
    assert (stats.solved_count, stats.total_submissions, stats.acceptance_rate) == (0, 0, 0)


def test_acceptance_percent_rounds_half_up():
    assert acceptance_percent(1, 8) == 13
    assert acceptance_percent(1, 3) == 33
    assert acceptance_percent(2, 3) == 67
    assert acceptance_percent(5, 5) == 100
    assert acceptance_percent(0, 0) == 0


def test_metric_winner():
    assert metric("Rating", 1500, 1200).winner == 1
    assert metric("Rating", 1200, 1500).winner == 2
    assert metric("Rating", 1400, 1400).winner is None


def test_format_value():
    m = metric("Acceptance Rate", 30, 0, suffix="%")
    assert format_value(m, 1) == "30%"
    assert format_value(m, 2) == "0%"


def routes(users, statuses):
    def by_handle(table):
        def answer(params):
            handle = params.get("handle") or params.get("handles")
            return table[handle]
        return answer
    return {"user.info": by_handle(users), "user.status": by_handle(statuses)}


def test_compare_handles(fake_client):
    client = fake_client(routes(
        {"a": ok([{"handle": "a", "rating": 1400, "maxRating": 1600, "rank": "specialist"}]),
         "b": ok([{"handle": "b", "rating": 1400}])},
        {"a": ok(handle_a_submissions()), "b": ok([])},
    ))
    comparison = compare_handles("a", " b ", client)
    metrics = {m.label: m for m in comparison.metrics}

    assert comparison.first.user.handle == "a"
    assert comparison.second.user.handle == "b"
    assert metrics["Rating"].winner is None
    assert (metrics["Max Rating"].value2, metrics["Max Rating"].winner) == (0, 1)
    assert (metrics["Problems Solved"].value1, metrics["Problems Solved"].winner) == (3, 1)
    assert (metrics["Acceptance Rate"].value1, metrics["Acceptance Rate"].value2) == (30, 0)
    assert [m.label for m in comparison.metrics] == ["Rating", "Max Rating", "Problems Solved", "Acceptance Rate"]


def test_compare_fails_as_a_whole(fake_client):
    client = fake_client(routes(
        {"a": ok([{"handle": "a", "rating": 1400}]),
         "ghost": failed("handles: User with handle ghost not found")},
        {"a": ok(handle_a_submissions()), "ghost": failed("handle: User with handle ghost not found")},
    ))
    with pytest.raises(ComparisonError) as e:
        compare_handles("a", "ghost", client)
    assert str(e.value) == USER_MESSAGE


def test_compare_requires_both_handles(fake_client):
    client = fake_client({})
    with pytest.raises(ComparisonError, match="Please enter both handles"):
        compare_handles("a", "   ", client)
    assert client.session.calls == []


def test_compare_wrong_shape_profile(fake_client):
    client = fake_client(routes(
        {"a": ok([{"handle": "a"}]), "b": ok([{}])},
        {"a": ok([]), "b": ok([])},
    ))
    with pytest.raises(ComparisonError) as e:
        compare_handles("a", "b", client)
    assert str(e.value) == USER_MESSAGE
