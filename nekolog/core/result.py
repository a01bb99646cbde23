"""Result: typed success/failure values for workflow composition.

Invariants:
    - Ok and Err are immutable; Err.and_then/Err.map never call their function
    - The first Err in a chain is returned as-is (same object, no wrapping)
    - ResultAsync resolves its awaitable once; later awaits return the cached Result

Design Decisions:
    - Expected failures travel as Err values; exceptions are left for bugs
    - ResultAsync.and_then accepts a Result, a ResultAsync or any awaitable of a
      Result, so a chain can mix pure validation steps with async repository calls
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success branch of Result."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Any:
        raise TypeError(f"Called unwrap_err on Ok({self.value!r})")

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[Any], Any]) -> Ok[T]:
        return self

    def and_then(self, fn: Callable[[T], "Result[U, Any]"]) -> "Result[U, Any]":
        return fn(self.value)

    def match(self, on_ok: Callable[[T], R], on_err: Callable[[Any], R]) -> R:
        return on_ok(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure branch of Result."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise TypeError(f"Called unwrap on Err({self.error!r})")

    def unwrap_err(self) -> E:
        return self.error

    def map(self, fn: Callable[[Any], Any]) -> Err[E]:
        return self

    def map_err(self, fn: Callable[[E], F]) -> Err[F]:
        return Err(fn(self.error))

    def and_then(self, fn: Callable[[Any], Any]) -> Err[E]:
        return self

    def match(self, on_ok: Callable[[Any], R], on_err: Callable[[E], R]) -> R:
        return on_err(self.error)

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Union[Ok[T], Err[E]]


async def _resolve_step(step: Any) -> Result:
    """Turn whatever a chained function returned into a settled Result."""
    if isinstance(step, (Ok, Err)):
        return step
    if isinstance(step, ResultAsync) or inspect.isawaitable(step):
        return await step
    raise TypeError(
        f"Chained step must return a Result or an awaitable Result, got {type(step).__name__}",
    )


class ResultAsync(Generic[T, E]):
    """A Result that is still being computed.

    Awaiting a ResultAsync yields the settled Ok/Err. Chaining methods return
    new ResultAsync instances and wait for the previous step before branching.
    """

    def __init__(self, awaitable: Awaitable[Result[T, E]]):
        self._awaitable = awaitable
        self._settled: Result[T, E] | None = None

    @classmethod
    def ok(cls, value: T) -> ResultAsync[T, Any]:
        return cls.from_result(Ok(value))

    @classmethod
    def err(cls, error: E) -> ResultAsync[Any, E]:
        return cls.from_result(Err(error))

    @classmethod
    def from_result(cls, result: Result[T, E]) -> ResultAsync[T, E]:
        async def _settled() -> Result[T, E]:
            return result
        return cls(_settled())

    async def _resolve(self) -> Result[T, E]:
        if self._settled is None:
            self._settled = await _resolve_step(self._awaitable)
        return self._settled

    def __await__(self):
        return self._resolve().__await__()

    def and_then(
        self,
        fn: Callable[[T], Result[U, E] | ResultAsync[U, E] | Awaitable[Result[U, E]]],
    ) -> ResultAsync[U, E]:
        async def _chained() -> Result[U, E]:
            result = await self._resolve()
            if isinstance(result, Err):
                return result
            return await _resolve_step(fn(result.value))
        return ResultAsync(_chained())

    def map(self, fn: Callable[[T], U]) -> ResultAsync[U, E]:
        async def _mapped() -> Result[U, E]:
            return (await self._resolve()).map(fn)
        return ResultAsync(_mapped())

    def map_err(self, fn: Callable[[E], F]) -> ResultAsync[T, F]:
        async def _mapped() -> Result[T, F]:
            return (await self._resolve()).map_err(fn)
        return ResultAsync(_mapped())

    async def match(self, on_ok: Callable[[T], R], on_err: Callable[[E], R]) -> R:
        return (await self._resolve()).match(on_ok, on_err)
