import asyncio
from ceprace.race import race

race_instance = race(timeout=0.2)

async def fetch_data() -> dict:
    async with race_instance:
        ...

asyncio.run(fetch_data())
