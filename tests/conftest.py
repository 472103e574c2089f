import pytest

from affiliate import settings


@pytest.fixture
def site_settings():
    """Install an in-memory settings source for the duration of a test."""

    source = settings.MappingSettings()
    previous = settings.configure(source)
    yield source.values
    settings.configure(previous)


class FakeResponse:
    def __init__(self, url, status_code=200, headers=None):
        self.url = url
        self.status_code = status_code
        self.headers = dict(headers or {})


class FakeSession:
    """Stands in for ``requests.Session`` and records HEAD calls."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def head(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_session():
    def factory(url=None, *, status_code=200, headers=None, error=None):
        response = FakeResponse(url, status_code=status_code, headers=headers) if url else None
        return FakeSession(response=response, error=error)

    return factory
