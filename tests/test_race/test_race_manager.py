# tests/test_race_manager.py
import asyncio
import pytest

from ceprace.race import RaceListener, register_race_listener
from ceprace.race.api import race
from ceprace.race.events import _RACE_LISTENERS
from ceprace.race.exceptions import RaceTimeout
from ceprace.race.manager import RaceManager


@pytest.fixture(autouse=True)
def _clean_registry():
    yield
    _RACE_LISTENERS.clear()


@pytest.mark.asyncio
async def test_loser_is_not_cancelled_and_keeps_running():
    finished = asyncio.Event()

    async def slow():
        await asyncio.sleep(0.05)
        finished.set()
        return "B"

    async def fast():
        return "A"

    manager = RaceManager(timeout=1.0, name="cep")
    result = await manager({"fast": fast(), "slow": slow()})

    assert result.contender == "fast"
    assert len(manager.abandoned) == 1
    await manager.wait_abandoned()
    assert finished.is_set()
    assert manager.abandoned == frozenset()


@pytest.mark.asyncio
async def test_timeout_does_not_cancel_in_flight_contenders():
    finished = []

    async def slow(label):
        await asyncio.sleep(0.05)
        finished.append(label)
        return label

    manager = RaceManager(timeout=0.01)
    with pytest.raises(RaceTimeout):
        await manager({"a": slow("a"), "b": slow("b")})

    await manager.wait_abandoned()
    assert sorted(finished) == ["a", "b"]


@pytest.mark.asyncio
async def test_no_timeout_waits_for_first_completion():
    async def value(v, delay):
        await asyncio.sleep(delay)
        return v

    manager = RaceManager(timeout=None)
    result = await manager({"a": value("A", 0.02), "b": value("B", 0.0)})
    assert result.payload == "B"
    await manager.wait_abandoned()


@pytest.mark.asyncio
async def test_concurrent_races_do_not_mix_results():
    async def echo(cep, delay):
        await asyncio.sleep(delay)
        return cep

    manager = RaceManager(timeout=1.0)

    async def one(cep):
        return await manager({"a": echo(cep, 0.02), "b": echo(cep, 0.01)})

    results = await asyncio.gather(*(one(f"0100100{i}") for i in range(5)))

    assert [r.payload for r in results] == [f"0100100{i}" for i in range(5)]
    assert all(r.contender == "b" for r in results)
    await manager.wait_abandoned()


@pytest.mark.asyncio
async def test_registered_listener_factory_is_built_per_manager():
    built = []

    class Counter(RaceListener):
        def __init__(self):
            self.won = 0

        async def on_race_won(self, race, contender, result):
            self.won += 1

    async def factory(component):
        listener = Counter()
        built.append((component, listener))
        return listener

    register_race_listener(factory)

    async def value():
        return 1

    r1 = race(timeout=1.0, name="one")
    r2 = race(timeout=1.0, name="two")
    await r1.run({"a": value()})
    await r1.run({"a": value()})
    await r2.run({"a": value()})

    assert [c.name for c, _ in built] == ["one", "two"]
    assert [l.won for _, l in built] == [2, 1]


@pytest.mark.asyncio
async def test_registered_listener_instance_is_shared():
    class Counter(RaceListener):
        def __init__(self):
            self.timeouts = 0

        async def on_race_timeout(self, race):
            self.timeouts += 1

    counter = Counter()
    register_race_listener(counter)

    async def never():
        await asyncio.sleep(0.2)

    r = race(timeout=0.01)
    with pytest.raises(RaceTimeout):
        await r.run({"a": never()})
    assert counter.timeouts == 1
    await r.manager.wait_abandoned()


@pytest.mark.asyncio
async def test_listener_registered_after_first_race_is_notified():
    class Counter(RaceListener):
        def __init__(self):
            self.won = 0

        async def on_race_won(self, race, contender, result):
            self.won += 1

    async def value():
        return 1

    r = race(timeout=1.0)
    await r.run({"a": value()})

    late = Counter()
    register_race_listener(late)
    await r.run({"a": value()})

    assert late.won == 1


@pytest.mark.asyncio
async def test_concurrent_first_races_build_factory_once():
    built = []

    async def factory(component):
        await asyncio.sleep(0.01)
        built.append(component)
        return RaceListener()

    register_race_listener(factory)

    async def value(v):
        return v

    r = race(timeout=1.0, name="shared")
    results = await asyncio.gather(*(r.run({"a": value(i)}) for i in range(5)))

    assert [res.payload for res in results] == list(range(5))
    assert [c.name for c in built] == ["shared"]


@pytest.mark.asyncio
async def test_concurrent_context_blocks_keep_their_own_deadline():
    r = race(timeout=0.05)

    async def block(delay):
        async with r:
            await asyncio.sleep(delay)
        return delay

    fast, slow = await asyncio.gather(block(0.0), block(0.2), return_exceptions=True)

    assert fast == 0.0
    assert isinstance(slow, RaceTimeout)


@pytest.mark.asyncio
async def test_nested_context_blocks_on_one_manager():
    r = race(timeout=0.05)

    async with r:
        async with r:
            await asyncio.sleep(0)
        await asyncio.sleep(0)

    with pytest.raises(RaceTimeout):
        async with r:
            async with r:
                await asyncio.sleep(0)
            await asyncio.sleep(0.2)
