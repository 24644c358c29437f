class CepRaceError(Exception):
    """
    Base class for every error raised by ceprace
    """


class MissingCep(CepRaceError):
    """
    Raised when a lookup is requested without a postal code
    """

    def __init__(self, message: str = "Missing 'cep' query parameter") -> None:
        super().__init__(message)


class ConfigError(CepRaceError):
    """
    Raised when the configuration file cannot be used
    """
