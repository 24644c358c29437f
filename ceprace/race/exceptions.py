from ceprace.exceptions import CepRaceError


class RaceTimeout(CepRaceError):
    """
    Raised when no contender finishes before the race deadline.
    """


class RaceAllFailed(CepRaceError):
    """
    Raised when every contender failed and failed contenders may not win.
    """
