from typing import Any
from luxuryhomes.models.search import FilterState


class FilterStore:
    """Holds one FilterState and produces new immutable states from partial updates.

    No validation happens here: an inverted range is stored as given and left
    for the query compiler to deal with.
    """

    def __init__(self, initial: FilterState = None):
        self._state = initial or FilterState()

    @property
    def state(self) -> FilterState:
        return self._state

    def update(self, **partial: Any) -> FilterState:
        unknown = set(partial) - set(FilterState.model_fields)
        if unknown:
            raise ValueError(f"Unknown filter fields: {', '.join(sorted(unknown))}")

        # Re-validate so list-valued ranges become tuples and the state stays hashable
        self._state = FilterState.model_validate({**self._state.model_dump(), **partial})
        return self._state

    def reset(self) -> FilterState:
        self._state = FilterState()
        return self._state
