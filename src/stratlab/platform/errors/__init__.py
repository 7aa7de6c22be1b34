from .stratlab_error import StratlabError

__all__ = [
    "StratlabError",
]
