"""Unit tests for the retrying call executor."""
from unittest.mock import Mock

import pytest
import requests

from spotify_bridge.client.executor import CallExecutor
from spotify_bridge.client.request import RequestDescriptor
from spotify_bridge.utils.errors import (
    BadRequestError,
    ErrorKind,
    ForbiddenError,
    NotFoundError,
    RateLimitedError,
    RetriesExhaustedError,
    TransientError,
    UnauthorizedError,
)


def rate_limited(seconds):
    return RateLimitedError("Rate limited", retry_after=seconds, path="/me")


class TestExecuteSuccess:
    """Tests for requests that go through."""

    def test_first_attempt_returns_payload(self, make_executor, sleep):
        """A successful call is issued once with the current bearer token."""
        executor, transport = make_executor([{"id": "user"}])

        result = executor.execute(RequestDescriptor.get("/me"))

        assert result == {"id": "user"}
        assert len(transport.sent) == 1
        assert transport.sent[0]["authorization"] == "Bearer access-1"
        assert sleep.calls == []

    def test_parse_is_applied(self, make_executor):
        """The parse callable maps the payload to the result."""
        executor, _ = make_executor([{"name": "Song"}])

        result = executor.execute(RequestDescriptor.get("/tracks/1"), parse=lambda p: p["name"])

        assert result == "Song"

    def test_existing_authorization_header_is_kept(self, make_executor):
        """A request that already carries a token is sent as-is."""
        executor, transport = make_executor([{}])
        request = RequestDescriptor.get("/me")
        request.authorize("custom")

        executor.execute(request)

        assert transport.sent[0]["authorization"] == "Bearer custom"

    def test_budget_must_be_positive(self, credential):
        with pytest.raises(ValueError):
            CallExecutor(Mock(), credential, max_attempts=0)


class TestRateLimiting:
    """Tests for 429 handling."""

    def test_linear_backoff_scaled_by_attempt(self, make_executor, sleep):
        """k-1 rate limits mean k attempts and sum(retry_after_i * i + 1) sleep."""
        executor, transport = make_executor(
            [rate_limited(2), rate_limited(3), rate_limited(1), {"ok": True}]
        )

        result = executor.execute(RequestDescriptor.get("/me"))

        assert result == {"ok": True}
        assert len(transport.sent) == 4
        assert sleep.calls == [2 * 1 + 1, 3 * 2 + 1, 1 * 3 + 1]
        assert sleep.total == 14

    def test_success_on_last_attempt(self, make_executor, sleep):
        """The tenth attempt may still succeed."""
        executor, transport = make_executor([rate_limited(1)] * 9 + [{"ok": True}])

        assert executor.execute(RequestDescriptor.get("/me")) == {"ok": True}
        assert len(transport.sent) == 10
        assert sleep.calls == list(range(2, 11))

    def test_request_is_replayed_verbatim(self, make_executor):
        executor, transport = make_executor([rate_limited(1), {}])

        executor.execute(RequestDescriptor.get("/search", q="abba", type="artist"))

        assert transport.sent[0] == transport.sent[1]


class TestUnauthorized:
    """Tests for 401 handling."""

    def test_refresh_once_and_retry_with_new_token(self, make_executor):
        """Each 401 triggers exactly one refresh and rewrites the header."""
        auth = Mock()
        auth.refresh.return_value = "access-2"
        executor, transport = make_executor(
            [UnauthorizedError("expired", status_code=401), {"ok": True}], auth=auth
        )

        assert executor.execute(RequestDescriptor.get("/me")) == {"ok": True}

        auth.refresh.assert_called_once_with()
        assert transport.sent[0]["authorization"] == "Bearer access-1"
        assert transport.sent[1]["authorization"] == "Bearer access-2"

    def test_every_occurrence_refreshes(self, make_executor, sleep):
        auth = Mock()
        auth.refresh.side_effect = ["access-2", "access-3"]
        executor, transport = make_executor(
            [UnauthorizedError("expired"), UnauthorizedError("expired"), {}], auth=auth
        )

        executor.execute(RequestDescriptor.get("/me"))

        assert auth.refresh.call_count == 2
        assert transport.sent[2]["authorization"] == "Bearer access-3"
        assert sleep.calls == []

    def test_unauthorized_counts_toward_budget(self, make_executor):
        auth = Mock()
        auth.refresh.return_value = "access-2"
        executor, transport = make_executor([UnauthorizedError("expired")] * 3, auth=auth, max_attempts=3)

        with pytest.raises(RetriesExhaustedError) as exc_info:
            executor.execute(RequestDescriptor.get("/me"))

        assert exc_info.value.kind == ErrorKind.UNAUTHORIZED
        assert len(transport.sent) == 3

    def test_no_refresh_after_final_attempt(self, make_executor):
        """A 401 on the last attempt goes straight to exhaustion."""
        auth = Mock()
        auth.refresh.return_value = "access-2"
        executor, transport = make_executor(
            [UnauthorizedError("expired")] * 2, auth=auth, max_attempts=2
        )

        with pytest.raises(RetriesExhaustedError):
            executor.execute(RequestDescriptor.get("/me"))

        auth.refresh.assert_called_once_with()
        assert len(transport.sent) == 2

    def test_without_refresher_unauthorized_is_raised(self, make_executor):
        executor, transport = make_executor([UnauthorizedError("expired")])

        with pytest.raises(UnauthorizedError):
            executor.execute(RequestDescriptor.get("/me"))
        assert len(transport.sent) == 1


class TestNonRetryable:
    """Tests for errors that stop immediately."""

    @pytest.mark.parametrize(
        "error",
        [
            NotFoundError("missing", status_code=404),
            BadRequestError("bad", status_code=400),
            ForbiddenError("nope", status_code=403),
        ],
    )
    def test_single_attempt_no_sleep(self, make_executor, sleep, error):
        """NotFound, BadRequest and Forbidden surface after one attempt."""
        executor, transport = make_executor([error, {"never": "reached"}])

        with pytest.raises(type(error)) as exc_info:
            executor.execute(RequestDescriptor.get("/albums/x"))

        assert exc_info.value is error
        assert len(transport.sent) == 1
        assert sleep.calls == []


class TestTransientFailures:
    """Tests for network and server failures."""

    def test_network_error_waits_fixed_interval(self, make_executor, sleep):
        executor, transport = make_executor([requests.ConnectionError("reset"), {"ok": True}])

        assert executor.execute(RequestDescriptor.get("/me")) == {"ok": True}
        assert sleep.calls == [10]

    def test_exhaustion_wraps_last_error(self, make_executor, sleep):
        """After the budget is spent the last error is raised, wrapped."""
        last = TransientError("server error", status_code=502)
        executor, transport = make_executor(
            [TransientError("server error", status_code=500), rate_limited(4), last],
            max_attempts=3,
        )

        with pytest.raises(RetriesExhaustedError) as exc_info:
            executor.execute(RequestDescriptor.get("/me"))

        error = exc_info.value
        assert error.attempts == 3
        assert error.kind == ErrorKind.TRANSIENT
        assert error.status_code == 502
        assert error.__cause__ is last
        # No sleep after the final attempt
        assert sleep.calls == [10, 4 * 2 + 1]

    def test_foreign_exception_is_wrapped_as_transient(self, make_executor):
        executor, _ = make_executor([ValueError("bad json")], max_attempts=1)

        with pytest.raises(RetriesExhaustedError) as exc_info:
            executor.execute(RequestDescriptor.get("/me"))

        wrapped = exc_info.value.last_error
        assert isinstance(wrapped, TransientError)
        assert isinstance(wrapped.__cause__, ValueError)
