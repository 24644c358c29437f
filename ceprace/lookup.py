import logging
from typing import Optional, Sequence, Union

from ceprace.client.cep_clients import BrasilApiClient, ViaCepClient
from ceprace.config import Settings
from ceprace.models import BrasilApi, LookupRequest, ViaCep
from ceprace.race import RaceListener, RaceManager, RaceResult, race

_logger = logging.getLogger(__name__)

CepPayload = Union[ViaCep, BrasilApi]


class CepLookup:
    """
    Races ViaCEP against BrasilAPI for each postal code and keeps the first answer.

    Each call to ``lookup`` is independent: both fetchers get their own HTTP
    client, and the only state kept across calls is the set of abandoned
    fetches still finishing in the background.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        viacep: Optional[ViaCepClient] = None,
        brasilapi: Optional[BrasilApiClient] = None,
        listeners: Optional[Sequence[RaceListener]] = None,
    ) -> None:
        settings = settings or Settings()

        self._viacep = viacep or ViaCepClient(
            base_url=settings.viacep_url, request_timeout=settings.request_timeout
        )
        self._brasilapi = brasilapi or BrasilApiClient(
            base_url=settings.brasilapi_url, request_timeout=settings.request_timeout
        )
        self._race = race(
            timeout=settings.timeout,
            skip_failures=settings.skip_failures,
            name="cep_lookup",
            listeners=listeners,
        )(viacep=self._viacep.fetch, brasilapi=self._brasilapi.fetch)

    @property
    def manager(self) -> RaceManager:
        return self._race.manager

    async def lookup(self, cep: Optional[str]) -> RaceResult[CepPayload]:
        request = LookupRequest.parse(cep)
        result = await self._race(request.cep)
        _log_winner(result)
        return result

    async def aclose(self) -> None:
        await self._race.manager.wait_abandoned()


def _log_winner(result: RaceResult[CepPayload]) -> None:
    if result.payload is None:
        _logger.info(f"{result.contender} response:\nnull")
        return
    _logger.info(f"{result.contender} response:\n{result.payload.model_dump_json(indent=2)}")
