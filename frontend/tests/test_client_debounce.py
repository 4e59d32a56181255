import asyncio
from wellness_client.debounce import Debouncer

def test_rapid_schedules_fire_once():
    calls = []

    async def scenario():
        async def cb():
            calls.append(asyncio.get_running_loop().time())
        d = Debouncer(0.05, cb)
        for _ in range(5):
            d.schedule()
            await asyncio.sleep(0.01)
        assert d.pending
        await d.drain()
        assert not d.pending

    asyncio.run(scenario())
    assert len(calls) == 1

def test_cancel_prevents_callback():
    calls = []

    async def scenario():
        async def cb():
            calls.append(1)
        d = Debouncer(0.02, cb)
        d.schedule()
        d.cancel()
        await asyncio.sleep(0.06)
        await d.drain()

    asyncio.run(scenario())
    assert calls == []

def test_schedule_during_running_callback_does_not_cancel_it():
    finished = []

    async def scenario():
        gate = asyncio.Event()

        async def cb():
            await gate.wait()
            finished.append(1)

        d = Debouncer(0.01, cb)
        d.schedule()
        await asyncio.sleep(0.03)      # callback now waiting on the gate
        d.schedule()                   # new countdown, the running one survives
        gate.set()
        await d.drain()

    asyncio.run(scenario())
    assert finished == [1, 1]
