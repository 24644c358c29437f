import logging

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ceprace.exceptions import CepRaceError

ModelT = TypeVar("ModelT", bound=BaseModel)


class ClientError(CepRaceError):
    pass


class ClientInterface(ABC):
    def __init__(self, client_name: Optional[str] = None) -> None:
        super().__init__()

        self._client_name = self.__class__.__name__ if client_name is None else client_name
        self._log = logging.getLogger(f"ApiClient.{self._client_name}")

    @property
    def client_name(self) -> str:
        return self._client_name


class CepClient(ClientInterface, Generic[ModelT]):
    """
    One-shot GET against a postal-code service, decoded into a fixed schema.

    Every fetch opens and closes its own ``httpx.AsyncClient`` so that
    concurrent lookups never share a connection, response or decode buffer.
    There are no retries. The HTTP status is not inspected: whatever body
    comes back is decoded against the schema.
    """

    model: type[ModelT]
    label: str = "CepService"

    def __init__(
        self,
        client_name: Optional[str] = None,
        *,
        base_url: str,
        request_timeout: Optional[float] = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(client_name)
        self.base_url = base_url.rstrip("/")
        self._request_timeout = request_timeout
        self._transport = transport

        self._log.info(f"Creating {self.client_name} client: base_url={self.base_url}")

    @abstractmethod
    def url_for(self, cep: str) -> str:
        ...

    def _client_kwargs(self) -> dict[str, Any]:
        client_kwargs: dict[str, Any] = {"timeout": self._request_timeout}
        if self._transport is not None:
            client_kwargs["transport"] = self._transport
        return client_kwargs

    async def fetch_or_raise(self, cep: str) -> ModelT:
        """
        Fetch and decode the record for ``cep``.

        Raises:
            ClientError: the request, the body read or the decode failed
        """
        url = self.url_for(cep)
        self._log.debug(f"Sending GET request to {url}")

        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ClientError(f"GET {url} failed: {e!r}") from e

        self._log.debug(f"Response: {response.status_code}")

        try:
            return self.model.model_validate_json(response.content)
        except ValidationError as e:
            raise ClientError(
                f"could not decode {self.label} response (HTTP {response.status_code}): {e}"
            ) from e

    async def fetch(self, cep: str) -> Optional[ModelT]:
        """Like fetch_or_raise, but any failure is logged and reported as None."""
        try:
            return await self.fetch_or_raise(cep)
        except ClientError as e:
            self._log.error(f"Error fetching {self.label}: {e}")
            return None
