# tests/test_otel_metrics.py
import asyncio

import pytest
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from ceprace.integrations.opentelemetry import CepRaceOtelInstrumentor
from ceprace.race import race
from ceprace.race.events import _RACE_LISTENERS
from ceprace.race.exceptions import RaceTimeout


@pytest.fixture
def reader():
    reader = InMemoryMetricReader()
    provider = MeterProvider(metric_readers=[reader])
    CepRaceOtelInstrumentor().instrument(namespace="test", meter_provider=provider)
    yield reader
    _RACE_LISTENERS.clear()


def _points(reader) -> dict[str, list]:
    points = {}
    data = reader.get_metrics_data()
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                points[metric.name] = list(metric.data.data_points)
    return points


@pytest.mark.asyncio
async def test_winner_and_failure_counters(reader):
    async def broken(cep):
        raise RuntimeError("boom")

    async def ok(cep):
        await asyncio.sleep(0.01)
        return cep

    lookup = race(timeout=1.0, name="cep")(viacep=broken, brasilapi=ok)
    await lookup("01001000")
    await lookup.manager.wait_abandoned()

    points = _points(reader)
    won = points["test.cep.race.won"]
    assert [(p.attributes["contender"], p.attributes["empty"], p.value) for p in won] == [("viacep", True, 1)]
    failure = points["test.cep.race.contender_failure"]
    assert [(p.attributes["contender"], p.value) for p in failure] == [("viacep", 1)]


@pytest.mark.asyncio
async def test_timeout_counter(reader):
    async def slow(cep):
        await asyncio.sleep(0.2)

    lookup = race(timeout=0.01, name="cep")(viacep=slow)
    with pytest.raises(RaceTimeout):
        await lookup("01001000")
    await lookup.manager.wait_abandoned()

    assert [p.value for p in _points(reader)["test.cep.race.timeout"]] == [1]
