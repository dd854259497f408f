from typing import Any, List, Optional
from luxuryhomes.models.property import Property
from luxuryhomes.models.search import DisplayMode, FetchResult, FilterState
from luxuryhomes.modules.search.coordinator import FetchCoordinator, FetchSubscription
from luxuryhomes.modules.search.filter_store import FilterStore


class ListingsView:
    """A browsing session: owned filter state, one subscription, and a list/map toggle.

    Both presentations read the subscription's single FetchResult, so switching
    display mode never triggers a fetch.
    """

    def __init__(
        self,
        coordinator: FetchCoordinator,
        store: Optional[FilterStore] = None,
        display_mode: DisplayMode = DisplayMode.MAP,
    ):
        self.store = store or FilterStore()
        self.subscription = FetchSubscription(coordinator)
        self.display_mode = display_mode

    @property
    def filters(self) -> FilterState:
        return self.store.state

    @property
    def result(self) -> Optional[FetchResult]:
        return self.subscription.result

    async def apply(self, **partial: Any) -> Optional[FetchResult]:
        return await self.subscription.set_filters(self.store.update(**partial))

    async def reset(self) -> Optional[FetchResult]:
        return await self.subscription.set_filters(self.store.reset())

    async def refresh(self) -> Optional[FetchResult]:
        return await self.subscription.set_filters(self.store.state)

    def show_map(self):
        self.display_mode = DisplayMode.MAP

    def show_list(self):
        self.display_mode = DisplayMode.LIST

    def list_items(self) -> List[Property]:
        result = self.result
        if result is None or not result.is_success:
            return []
        return result.data

    def map_markers(self) -> List[Property]:
        # Map only renders once there is data, and only in map mode
        if self.display_mode != DisplayMode.MAP:
            return []
        return self.list_items()

    def close(self):
        self.subscription.close()
