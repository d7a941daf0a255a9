from datetime import datetime

import pytest
import pytz
import requests

from collect import CodeforcesClient
from structs import Problem, Submission

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=pytz.utc)


def ts(year, month, day, hour=12, minute=0):
    return int(datetime(year, month, day, hour, minute, tzinfo=pytz.utc).timestamp())


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def json(self):
        if isinstance(self.payload, ValueError):
            raise self.payload
        return self.payload


class FakeSession:
    """Answers requests by API method name: a payload, an exception, or a callable taking params."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, params=None, timeout=None):
        method = url.rsplit("/", 1)[-1]
        self.calls.append((method, params, timeout))
        answer = self.routes[method]
        if callable(answer):
            answer = answer(params)
        if isinstance(answer, requests.RequestException):
            raise answer
        return FakeResponse(answer)


def ok(result):
    return {"status": "OK", "result": result}


def failed(comment):
    return {"status": "FAILED", "comment": comment}


def submission_dict(contest_id, index, verdict="OK", tags=(), rating=None, when=None, name=None):
    problem = {"contestId": contest_id, "index": index, "name": name or f"Problem {contest_id}{index}",
               "tags": list(tags), "type": "PROGRAMMING"}
    if rating is not None:
        problem["rating"] = rating
    sub = {
        "id": contest_id * 100 + len(index),
        "contestId": contest_id,
        "creationTimeSeconds": when if when is not None else ts(2024, 6, 1),
        "relativeTimeSeconds": 2147483647,
        "problem": problem,
        "author": {"participantType": "PRACTICE"},
        "programmingLanguage": "GNU C++17",
        "testset": "TESTS",
    }
    if verdict is not None:
        sub["verdict"] = verdict
    return sub


@pytest.fixture
def make_submission():
    def _make(contest_id=1, index="A", verdict="OK", tags=(), rating=None, when=None):
        return Submission(**submission_dict(contest_id, index, verdict, tags, rating, when))
    return _make


@pytest.fixture
def make_problem():
    def _make(contest_id, index, rating=None, tags=()):
        return Problem(contestId=contest_id, index=index, name=f"Problem {contest_id}{index}",
                       rating=rating, tags=list(tags))
    return _make


@pytest.fixture
def fake_client():
    def _make(routes):
        session = FakeSession(routes)
        return CodeforcesClient(base_url="https://cf.test/api", timeout=5, session=session)
    return _make
