from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

S = TypeVar("S")
R = TypeVar("R")


@dataclass(frozen=True)
class MutationResult(Generic[S]):
    """Completion signal for a mutation: the state the caller should show next."""

    ok: bool
    state: S
    error: Optional[DomainError] = None
    value: object = None


class OptimisticCommand(Generic[S, R]):
    """Apply a change locally, push it to the store, re-fetch on failure.

    On failure we never hand-roll an inverse patch: the authoritative state is
    reloaded through `refetch` and returned with the error.
    """

    def __init__(
        self,
        *,
        apply: Callable[[S], S],
        commit: Callable[[], R],
        refetch: Callable[[], S],
        description: str = "mutation",
    ):
        self._apply = apply
        self._commit = commit
        self._refetch = refetch
        self._description = description

    def run(self, current: S, *, on_local: Optional[Callable[[S], None]] = None) -> MutationResult[S]:
        local = self._apply(current)
        if on_local is not None:
            on_local(local)

        try:
            value = self._commit()
        except DomainError as e:
            logger.warning("%s failed, re-synchronizing: %s", self._description, e)
            return MutationResult(ok=False, state=self._refetch(), error=e)

        return MutationResult(ok=True, state=local, value=value)
