from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from ceprace.exceptions import MissingCep


class LookupRequest(BaseModel):
    cep: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, cep: Optional[str]) -> "LookupRequest":
        """Validate a raw ``cep`` query value, raising MissingCep when absent or empty."""
        if cep is None:
            raise MissingCep()
        try:
            return cls(cep=cep)
        except ValidationError as e:
            raise MissingCep() from e


class _Payload(BaseModel):
    # upstream schemas grow fields over time; unknown keys are ignored
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # a JSON null leaves the field at its default (None for nullable fields)
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class ViaCep(_Payload):
    """Address record as returned by ViaCEP (``/ws/{cep}/json/``)."""

    cep: str = ""
    logradouro: str = ""
    complemento: str = ""
    bairro: str = ""
    localidade: str = ""
    uf: str = ""
    unidade: str = ""
    ibge: str = ""
    gia: str = ""
    ddd: str = ""
    siafi: str = ""


class Coordinates(_Payload):
    longitude: str = ""
    latitude: str = ""


class Location(_Payload):
    type: str = ""
    coordinates: Coordinates = Field(default_factory=Coordinates)


class BrasilApi(_Payload):
    """Address record as returned by BrasilAPI (``/api/cep/v2/{cep}``)."""

    cep: str = ""
    state: str = ""
    city: str = ""
    neighborhood: Optional[str] = None
    street: Optional[str] = None
    service: str = ""
    location: Location = Field(default_factory=Location)
