import pytest

from workout_video_factory.application.retry_policy import retry


def test_retry_returns_first_success():
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise RuntimeError("transient")
        return "ok"

    retried = []
    assert retry(flaky, retries=2, delay_sec=0.0, on_retry=lambda n, exc: retried.append(n)) == "ok"
    assert retried == [1, 2]


def test_retry_reraises_last_error():
    def broken():
        raise ValueError("still broken")

    with pytest.raises(ValueError, match="still broken"):
        retry(broken, retries=1, delay_sec=0.0)
