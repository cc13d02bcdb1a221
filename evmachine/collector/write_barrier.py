"""A view of collected data handed out after a write barrier fired."""

from typing import Generic, TypeVar

T = TypeVar("T")


class Mutation(Generic[T]):
    """Access to data that may be mutated safely for the current heap session."""

    def __init__(self, patient: T) -> None:
        self._patient = patient

    def get(self) -> T:
        """The data behind the barrier."""
        return self._patient

    def __repr__(self) -> str:
        return f"Mutation({self._patient!r})"