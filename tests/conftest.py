import pytest

from app import create_app
from config import Settings
from rate_limiter import SlidingWindowRateLimiter


class StubModelClient:
    """Records prompts and replies with a canned completion (or raises)."""

    model_name = "stub-model"

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    @property
    def call_count(self):
        return len(self.prompts)

    async def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, secs):
        self.now += secs


@pytest.fixture
def settings():
    return Settings(app_env="development", model_timeout_secs=2, model_retry_backoff_secs=0)


@pytest.fixture
def stub_client():
    return StubModelClient(
        reply="Possible Conditions: common cold. General Recommendations: rest and fluids."
    )


@pytest.fixture
def make_client(settings, stub_client):
    """Build a Flask test client; keyword overrides go into Settings."""

    def _make(model_client=None, rate_limiter=None, **overrides):
        cfg = settings.model_copy(update=overrides)
        app = create_app(cfg, model_client=model_client or stub_client, rate_limiter=rate_limiter)
        app.config["TESTING"] = True
        return app.test_client()

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
