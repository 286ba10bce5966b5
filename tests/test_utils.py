import pytest
from BrokerIntegrator.exceptions import NetworkError
from BrokerIntegrator.utils import with_error_handling, with_retries


class Unreliable:
    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise NetworkError("Temporary failure")
        return "Success"


@pytest.mark.asyncio
async def test_with_retries_success():
    source = Unreliable(failures=2)
    fetch = with_retries(max_retries=2, delay=0)(source.fetch)
    assert await fetch() == "Success"
    assert source.calls == 3

@pytest.mark.asyncio
async def test_with_retries_failure():
    source = Unreliable(failures=10)
    fetch = with_retries(max_retries=2, delay=0)(source.fetch)
    with pytest.raises(NetworkError):
        await fetch()
    assert source.calls == 3

@pytest.mark.asyncio
async def test_with_error_handling_returns_fallback():
    @with_error_handling(fallback=[])
    async def list_properties():
        raise NetworkError("down")

    assert await list_properties() == []

@pytest.mark.asyncio
async def test_with_error_handling_passes_result_through():
    @with_error_handling(fallback=[])
    async def list_properties():
        return ["p1"]

    assert await list_properties() == ["p1"]
