import asyncio
from ceprace.client import BrasilApiClient, ViaCepClient
from ceprace.race import race

viacep = ViaCepClient()
brasilapi = BrasilApiClient()

lookup = race(timeout=1.0, name="cep")(viacep=viacep.fetch, brasilapi=brasilapi.fetch)


async def main() -> None:
    result = await lookup("01001000")
    print(result.contender, result.payload)
    await lookup.manager.wait_abandoned()

asyncio.run(main())
