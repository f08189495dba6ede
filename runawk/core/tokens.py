"""Ordered accumulator for the wrapped interpreter's argument vector."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class TokenQueue:
    """Append-only argv under construction.

    Slot 0 is reserved for the program name and filled last, once the
    program source is known. `None` entries mark reserved slots; a final
    `None` is the exec terminator appended by `terminate()`.
    """

    def __init__(self, alt_name: str | None = None) -> None:
        self._tokens: list[str | None] = [None]
        self._terminated = False
        if alt_name:
            self.push(alt_name)

    def push(self, token: str | None) -> None:
        if self._terminated:
            raise ValueError("cannot push onto a terminated token queue")
        self._tokens.append(None if token is None else str(token))

    def extend(self, tokens: Iterable[str]) -> None:
        for token in tokens:
            self.push(token)

    def push_option(self, flag: str, value: str) -> None:
        """Push a flag and its argument as two separate tokens."""
        self.push(flag)
        self.push(value)

    def set_program_name(self, name: str) -> None:
        self._tokens[0] = str(name)

    @property
    def program_name(self) -> str | None:
        return self._tokens[0]

    def terminate(self) -> None:
        """Append the exec terminator. No pushes are accepted afterwards."""
        if not self._terminated:
            self._tokens.append(None)
            self._terminated = True

    @property
    def terminated(self) -> bool:
        return self._terminated

    def to_argv(self) -> list[str]:
        """Return the finished vector without the terminator.

        Raises:
            ValueError: If the program name was never filled in or a
                reserved slot is still empty.
        """
        if self._tokens[0] is None:
            raise ValueError("program name slot was never filled")
        body = self._tokens[:-1] if self._terminated else self._tokens
        if any(token is None for token in body):
            raise ValueError("token queue still has unfilled slots")
        return [token for token in body if token is not None]

    def __iter__(self) -> Iterator[str | None]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, index: int) -> str | None:
        return self._tokens[index]

    def __repr__(self) -> str:
        return f"TokenQueue({self._tokens!r})"
