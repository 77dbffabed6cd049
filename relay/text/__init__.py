from .punctuation import normalize

__all__ = ["normalize"]
