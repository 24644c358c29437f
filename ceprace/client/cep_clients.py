from typing import Optional

import httpx

from ceprace.client.base_client import CepClient
from ceprace.models import BrasilApi, ViaCep

VIACEP_URL = "http://viacep.com.br"
BRASILAPI_URL = "https://brasilapi.com.br"


class ViaCepClient(CepClient[ViaCep]):
    model = ViaCep
    label = "ViaCep"

    def __init__(
        self,
        client_name: Optional[str] = None,
        *,
        base_url: str = VIACEP_URL,
        request_timeout: Optional[float] = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(client_name, base_url=base_url, request_timeout=request_timeout, transport=transport)

    def url_for(self, cep: str) -> str:
        return f"{self.base_url}/ws/{cep}/json/"


class BrasilApiClient(CepClient[BrasilApi]):
    model = BrasilApi
    label = "BrasilApi"

    def __init__(
        self,
        client_name: Optional[str] = None,
        *,
        base_url: str = BRASILAPI_URL,
        request_timeout: Optional[float] = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(client_name, base_url=base_url, request_timeout=request_timeout, transport=transport)

    def url_for(self, cep: str) -> str:
        return f"{self.base_url}/api/cep/v2/{cep}"
