from .nature_remo_provider import NatureRemoProvider, get_nature_remo_provider

__all__ = [
    "NatureRemoProvider",
    "get_nature_remo_provider"
]
