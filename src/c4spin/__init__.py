"""Connect Four Spin: a board-game engine with a self-play training loop."""

__version__ = "0.1.0"
