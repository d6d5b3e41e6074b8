"""Unit test fixtures (scripted attempt closures)."""

from typing import Iterable, Union

import pytest

from checkmate.retry.models import AttemptResult


class ScriptedAttempt:
    """Attempt closure replaying a fixed sequence of results.

    Records the (attempt_index, consecutive_successes) arguments of every
    call. Once the script is exhausted the last value repeats.
    """

    def __init__(self, script: Iterable[Union[bool, AttemptResult]]):
        self.script = list(script)
        self.calls: list[tuple[int, int]] = []

    async def __call__(self, attempt_index: int, successes: int):
        self.calls.append((attempt_index, successes))
        position = min(len(self.calls), len(self.script)) - 1
        return self.script[position]

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def scripted_attempt():
    """Build a ScriptedAttempt from a list of bools / AttemptResults."""
    return ScriptedAttempt
