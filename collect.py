"""Codeforces official API client and the concurrent fetches behind one dashboard lookup."""
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests
from pydantic import ValidationError

from config import settings
from structs import Problem, RatingChange, Submission, UserInfo
from utils import dicts_to_models, get_logger

logger = get_logger(__name__)

USER_MESSAGE = "Failed to fetch data. Please check the handle and try again."


class CodeforcesError(Exception):
    """Base for every failure of a Codeforces API call."""

    def __init__(self, method: str, detail: str = ""):
        self.method = method
        self.detail = detail
        super().__init__(f"{method}: {detail}" if detail else method)


class HandleNotFound(CodeforcesError):
    pass


class DataUnavailable(CodeforcesError):
    pass


class TransportError(CodeforcesError):
    pass


class CodeforcesClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.CF_API_BASE).rstrip("/")
        timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self.timeout = timeout or None
        self.session = session or requests.Session()

    def _get(self, method: str, params: Optional[Dict[str, Any]] = None,
             error_cls: type = DataUnavailable) -> Any:
        url = f"{self.base_url}/{method}"
        try:
            response = self.session.get(url, params=params or {}, timeout=self.timeout)
            # failed calls still carry a JSON envelope, usually with a 400
            data = response.json()
        except requests.RequestException as e:
            logger.warning("Codeforces API %s unreachable: %s", method, e)
            raise TransportError(method, str(e)) from e
        except ValueError as e:
            logger.warning("Codeforces API %s returned malformed JSON: %s", method, e)
            raise TransportError(method, "malformed response") from e

        if not isinstance(data, dict) or data.get("status") != "OK":
            comment = data.get("comment", "Unknown error") if isinstance(data, dict) else "Unknown error"
            logger.warning("Codeforces API %s failed: %s", method, comment)
            raise error_cls(method, comment)
        return data.get("result")

    def _parse(self, method: str, model_cls: type, items: Any) -> list:
        # an OK envelope can still carry a result of the wrong shape
        try:
            return dicts_to_models(model_cls, items)
        except (ValidationError, TypeError, AttributeError) as e:
            logger.warning("Codeforces API %s returned an unexpected result: %s", method, e)
            raise TransportError(method, "malformed response") from e

    def user_info(self, handle: str) -> UserInfo:
        result = self._get("user.info", {"handles": handle}, error_cls=HandleNotFound)
        if not result:
            raise HandleNotFound("user.info", f"no user for handle {handle}")
        return self._parse("user.info", UserInfo, result)[0]

    def user_status(self, handle: str) -> List[Submission]:
        return self._parse("user.status", Submission, self._get("user.status", {"handle": handle}) or [])

    def user_rating(self, handle: str) -> List[RatingChange]:
        return self._parse("user.rating", RatingChange, self._get("user.rating", {"handle": handle}) or [])

    def problemset_problems(self) -> List[Problem]:
        result = self._get("problemset.problems") or {}
        problems = result.get("problems", []) if isinstance(result, dict) else result
        return self._parse("problemset.problems", Problem, problems)


def join_all(calls: Sequence[Callable[[], Any]]) -> List[Any]:
    """Run calls concurrently and return their results in order.

    The first failure is raised as soon as it happens; calls that have not
    started yet are cancelled and no partial result is returned.
    """
    if not calls:
        return []
    executor = ThreadPoolExecutor(max_workers=len(calls))
    try:
        futures = [executor.submit(call) for call in calls]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            if future in done and future.exception() is not None:
                for p in pending:
                    p.cancel()
                raise future.exception()
        return [future.result() for future in futures]
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def fetch_handle_data(handle: str, client: Optional[CodeforcesClient] = None) -> Dict[str, Any]:
    """Fetch profile, submissions and rating history for one handle.

    The three requests run concurrently. A failed profile lookup fails the whole
    lookup; failed submission or rating requests leave that part empty and add
    a warning so the rest can still be shown.
    """
    client = client or CodeforcesClient()
    handle = handle.strip()
    executor = ThreadPoolExecutor(max_workers=3)
    try:
        info_future = executor.submit(client.user_info, handle)
        status_future = executor.submit(client.user_status, handle)
        rating_future = executor.submit(client.user_rating, handle)

        user = info_future.result()

        warnings = []
        try:
            submissions = status_future.result()
        except CodeforcesError as e:
            logger.warning("Submissions for %s unavailable: %s", handle, e)
            submissions = []
            warnings.append("Submission history is unavailable right now.")
        try:
            ratings = rating_future.result()
        except CodeforcesError as e:
            logger.warning("Rating history for %s unavailable: %s", handle, e)
            ratings = []
            warnings.append("Rating history is unavailable right now.")
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    logger.info("Fetched %s: %d submissions, %d rated contests", handle, len(submissions), len(ratings))
    return {
        "user": user,
        "submissions": submissions,
        "ratings": ratings,
        "warnings": warnings,
    }
