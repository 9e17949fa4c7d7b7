"""Tests for human play."""

import numpy as np
import pytest

from c4spin.errors import InvalidMoveInputError
from c4spin.games import ConnectFourSpin, Move, Player
from c4spin.interactive import PROMPT, parse_move, play_against_human, prompt_move


class FixedRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


class AscendingPolicy:
    """Prefers lower linear indices, so the first empty space is played."""

    def evaluate(self, board_encoding: np.ndarray) -> np.ndarray:
        return -np.arange(board_encoding.shape[0], dtype=np.float32)


class OrderedPolicy:
    """Plays the listed moves first, in order."""

    def __init__(self, moves: list[Move], columns: int = 5):
        self.order = [move.to_linear(columns) for move in moves]

    def evaluate(self, board_encoding: np.ndarray) -> np.ndarray:
        scores = np.zeros(board_encoding.shape[0], dtype=np.float32)
        for rank, index in enumerate(self.order):
            scores[index] = len(self.order) - rank
        return scores


class ScriptedInput:
    """Feeds prepared lines to a prompt."""

    def __init__(self, lines: list[str]):
        self.lines = list(lines)
        self.prompts = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.lines.pop(0)


class TestParseMove:
    """Tests for parse_move."""

    @pytest.mark.parametrize(
        "text,expected",
        [("a1", Move(0, 0)), ("d3", Move(3, 2)), ("e8", Move(4, 7)), (" B2 ", Move(1, 1))],
    )
    def test_valid(self, text, expected):
        assert parse_move(text, 5, 8) == expected

    @pytest.mark.parametrize("text", ["", "a", "a10", "1a", "?3", "aa", "d 3"])
    def test_malformed(self, text):
        with pytest.raises(InvalidMoveInputError):
            parse_move(text, 5, 8)

    @pytest.mark.parametrize("text", ["f1", "a9", "z1", "a0"])
    def test_off_board(self, text):
        with pytest.raises(InvalidMoveInputError, match="off the board"):
            parse_move(text, 5, 8)


class TestPromptMove:
    """Tests for prompt_move."""

    def test_retries_until_valid(self):
        game = ConnectFourSpin(rng=FixedRandom(0.9))
        game.play(Move(0, 0))
        scripted = ScriptedInput(["nope", "a1", "b1"])
        output = []

        move = prompt_move(game, scripted, output.append)

        assert move == Move(1, 0)
        assert scripted.prompts == [PROMPT] * 3
        assert len(output) == 2
        assert all(line.startswith("Bad input, try again.") for line in output)


class TestPlayAgainstHuman:
    """Tests for play_against_human."""

    def test_bot_wins(self):
        """Bot fills row 1 while the human plays row 8."""
        game = ConnectFourSpin(rng=FixedRandom(0.9))
        scripted = ScriptedInput(["zz", "a1", "a8", "b8", "c8"])
        output = []

        winner = play_against_human(game, AscendingPolicy(), scripted, output.append)

        assert winner is Player.ONE
        assert scripted.lines == []
        assert "Player [one] won!" in output
        assert output[-1] == str(game)
        assert game.find_line(Player.ONE) == [Move(0, 0), Move(1, 0), Move(2, 0), Move(3, 0)]

    def test_human_wins(self):
        """The human completes column a while the bot scatters its pieces."""
        game = ConnectFourSpin(rng=FixedRandom(0.9))
        policy = OrderedPolicy([Move(4, 7), Move(2, 7), Move(4, 5), Move(2, 5), Move(4, 3)])
        scripted = ScriptedInput(["a1", "a2", "a3", "a4"])
        output = []

        winner = play_against_human(game, policy, scripted, output.append)

        assert winner is Player.TWO
        assert "Player [two] won!" in output

    def test_resets_before_play(self):
        game = ConnectFourSpin(rng=FixedRandom(0.9))
        game.play(Move(0, 0))
        scripted = ScriptedInput(["a8", "b8", "c8"])

        winner = play_against_human(game, AscendingPolicy(), scripted, lambda line: None)

        assert winner is Player.ONE
