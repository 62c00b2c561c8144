from .canonical import CanonicalResponse, canonicalize
from .engine import aggregate

__all__ = ["CanonicalResponse", "aggregate", "canonicalize"]
