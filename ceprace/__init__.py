import importlib
from typing import TYPE_CHECKING

__version__ = "0.1.0"

# Public name -> (module_path, internal_name); modules load on first access
_IMPORT_MAP = {
    "RaceResult": ("ceprace.race.typing", "RaceResult"),
    "RaceTimeout": ("ceprace.race.exceptions", "RaceTimeout"),
    "CepLookup": ("ceprace.lookup", "CepLookup"),
    "Settings": ("ceprace.config", "Settings"),
    "load_settings": ("ceprace.config", "load_settings"),
    "create_app": ("ceprace.service.main", "create_app"),
}

if TYPE_CHECKING:
    from ceprace.race.typing import RaceResult
    from ceprace.race.exceptions import RaceTimeout
    from ceprace.lookup import CepLookup
    from ceprace.config import Settings, load_settings
    from ceprace.service.main import create_app


def __getattr__(name: str):
    if name in _IMPORT_MAP:
        module_path, attr_name = _IMPORT_MAP[name]
        module = importlib.import_module(module_path)
        return getattr(module, attr_name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_IMPORT_MAP.keys())
