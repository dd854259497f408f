from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Tuple, Union, Mapping, Any
from enum import Enum
import re
from luxuryhomes.models.property import Property

DEFAULT_PRICE_RANGE = (0, 5_000_000)
DEFAULT_BEDROOM_RANGE = (1, 7)
DEFAULT_BATHROOM_RANGE = (1.0, 5.0)
DEFAULT_SQUARE_FEET_RANGE = (500, 10_000)


class FilterState(BaseModel):
    """The complete set of search criteria at a point in time.

    Frozen so that it is hashable: two structurally equal states are the same
    cache key. Ranges are (min, max) and are deliberately not validated here.
    """
    model_config = ConfigDict(frozen=True)

    location: str = ""
    city: str = ""
    price_range: Tuple[int, int] = DEFAULT_PRICE_RANGE
    bedroom_range: Tuple[int, int] = DEFAULT_BEDROOM_RANGE
    bathroom_range: Tuple[float, float] = DEFAULT_BATHROOM_RANGE
    square_feet_range: Tuple[int, int] = DEFAULT_SQUARE_FEET_RANGE
    home_type: Optional[str] = None
    construction_status: Optional[str] = None
    ownership_type: Optional[str] = None
    quick_move_in: bool = False


class ClauseOp(str, Enum):
    ILIKE = "ilike"  # SQL-style pattern, % is the only wildcard
    ANY_ILIKE = "any_ilike"
    GTE = "gte"
    LTE = "lte"
    EQ = "eq"


def _like_matches(pattern: str, text: Any) -> bool:
    regex = "".join(".*" if ch == "%" else re.escape(ch) for ch in pattern)
    return re.fullmatch(regex, str(text), re.IGNORECASE | re.DOTALL) is not None


class Clause(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    op: ClauseOp
    value: Union[bool, int, float, str, Tuple[str, ...]]

    def matches(self, record: Mapping[str, Any]) -> bool:
        """Evaluate this predicate against a flat property record"""
        actual = record.get(self.field)

        if self.op == ClauseOp.EQ:
            return actual == self.value

        # Missing values never satisfy a range or pattern
        if actual is None:
            return False

        if self.op == ClauseOp.GTE:
            return actual >= self.value
        if self.op == ClauseOp.LTE:
            return actual <= self.value
        if self.op == ClauseOp.ILIKE:
            return _like_matches(self.value, actual)
        if self.op == ClauseOp.ANY_ILIKE:
            return any(_like_matches(pattern, actual) for pattern in self.value)

        raise ValueError(f"Unsupported clause operator: {self.op}")


class CompiledQuery(BaseModel):
    """Ordered predicate clauses; equal filter states compile to equal queries"""
    model_config = ConfigDict(frozen=True)

    clauses: Tuple[Clause, ...] = ()

    def matches(self, record: Mapping[str, Any]) -> bool:
        return all(clause.matches(record) for clause in self.clauses)

    def field_names(self) -> List[str]:
        return [clause.field for clause in self.clauses]


class FetchStatus(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class FetchResult(BaseModel):
    status: FetchStatus
    data: Optional[List[Property]] = None
    error: Optional[str] = None

    @classmethod
    def loading(cls) -> "FetchResult":
        return cls(status=FetchStatus.LOADING)

    @classmethod
    def success(cls, data: List[Property]) -> "FetchResult":
        return cls(status=FetchStatus.SUCCESS, data=list(data))

    @classmethod
    def failure(cls, reason: str) -> "FetchResult":
        return cls(status=FetchStatus.ERROR, error=reason)

    @property
    def is_loading(self) -> bool:
        return self.status == FetchStatus.LOADING

    @property
    def is_success(self) -> bool:
        return self.status == FetchStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == FetchStatus.ERROR


class DisplayMode(str, Enum):
    LIST = "list"
    MAP = "map"


class MapMarker(BaseModel):
    """Map pin for a listing; drawn from the same result as the list"""
    id: str
    title: str
    price: int
    location: str
    slug: str


class PropertySearchResponse(BaseModel):
    status: FetchStatus
    count: int
    properties: List[Property] = []
    display_mode: DisplayMode = DisplayMode.MAP
    markers: List[MapMarker] = []
    filters_applied: FilterState
