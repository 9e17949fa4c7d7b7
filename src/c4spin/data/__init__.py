"""Board encodings shared by self-play and training."""

from .encoding import encode_board

__all__ = [
    "encode_board",
]
