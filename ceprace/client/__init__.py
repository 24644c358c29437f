from .base_client import CepClient, ClientError, ClientInterface
from .cep_clients import BRASILAPI_URL, VIACEP_URL, BrasilApiClient, ViaCepClient


__all__ = [
    "CepClient",
    "ClientError",
    "ClientInterface",
    "BrasilApiClient",
    "ViaCepClient",
    "BRASILAPI_URL",
    "VIACEP_URL",
]
