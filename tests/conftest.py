"""Shared test helpers."""

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest

from examples_sync.core.runner import CommandResult


Response = tuple[int, str] | Callable[[list[str], Path | None], CommandResult]


class FakeRunner:
    """Records commands instead of running them.

    Responses are matched by argument prefix, longest prefix first; anything
    unmatched succeeds with empty output.
    """

    def __init__(self, responses: dict[tuple[str, ...], Response] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[list[str], Path | None]] = []

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        capture: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        args = [str(a) for a in args]
        self.calls.append((args, cwd))

        for prefix in sorted(self.responses, key=len, reverse=True):
            if tuple(args[: len(prefix)]) == prefix:
                response = self.responses[prefix]
                if callable(response):
                    return response(args, cwd)
                returncode, stdout = response
                return CommandResult(args=args, returncode=returncode, stdout=stdout)

        return CommandResult(args=args, returncode=0)

    @property
    def commands(self) -> list[str]:
        return [" ".join(args) for args, _ in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(args[: len(prefix)]) == prefix for args, _ in self.calls)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
