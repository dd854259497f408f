from typing import Dict, Any, List, Tuple
from luxuryhomes.models.search import FilterState, CompiledQuery, Clause, ClauseOp
import logging

logger = logging.getLogger(__name__)

# (filter state attribute, property record field), in compile order
RANGE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("price_range", "price"),
    ("bedroom_range", "bedrooms"),
    ("bathroom_range", "bathrooms"),
    ("square_feet_range", "square_feet"),
)

CATEGORICAL_FIELDS: Tuple[str, ...] = ("home_type", "construction_status", "ownership_type")

# Fields stored as text with a keyword sub-field in the properties index
KEYWORD_SUBFIELDS = {"location", "title"}


class QueryCompiler:
    """Compiles a FilterState into an ordered, deterministic CompiledQuery"""

    def compile(self, filters: FilterState) -> CompiledQuery:
        clauses: List[Clause] = []

        self._add_text_filters(clauses, filters)
        self._add_range_filters(clauses, filters)
        self._add_categorical_filters(clauses, filters)

        if filters.quick_move_in:
            clauses.append(Clause(field="quick_move_in", op=ClauseOp.EQ, value=True))

        compiled = CompiledQuery(clauses=tuple(clauses))
        logger.debug(f"Compiled filters {filters.model_dump()} into {len(clauses)} clauses")
        return compiled

    def _add_text_filters(self, clauses: List[Clause], filters: FilterState):
        location = filters.location.strip()
        if location:
            logger.debug(f"Applying location filter: {location}")
            clauses.append(Clause(field="location", op=ClauseOp.ILIKE, value=f"%{location}%"))

        city = filters.city.strip()
        if city:
            # Heuristic: any location containing the city text matches, so
            # "Miami" also matches "Miami Gardens"
            logger.debug(f"Applying city filter: {city}")
            clauses.append(Clause(
                field="location",
                op=ClauseOp.ANY_ILIKE,
                value=(f"%{city}%", f"%{city},%"),
            ))

    def _add_range_filters(self, clauses: List[Clause], filters: FilterState):
        # Both bounds are always emitted so default filters compile identically
        for attribute, field in RANGE_FIELDS:
            low, high = getattr(filters, attribute)
            if low > high:
                logger.warning(f"Inverted {attribute} ({low} > {high}) will match no properties")
            clauses.append(Clause(field=field, op=ClauseOp.GTE, value=low))
            clauses.append(Clause(field=field, op=ClauseOp.LTE, value=high))

    def _add_categorical_filters(self, clauses: List[Clause], filters: FilterState):
        for field in CATEGORICAL_FIELDS:
            value = getattr(filters, field)
            if value:
                clauses.append(Clause(field=field, op=ClauseOp.EQ, value=value))


def wildcard_value(pattern: str) -> str:
    """Convert a % pattern to Elasticsearch wildcard syntax; literal * ? and \\ are escaped"""
    escaped = pattern.replace("\\", "\\\\").replace("*", "\\*").replace("?", "\\?")
    return escaped.replace("%", "*")


def _wildcard(field: str, pattern: str) -> Dict[str, Any]:
    target = f"{field}.keyword" if field in KEYWORD_SUBFIELDS else field
    return {
        "wildcard": {
            target: {
                "value": wildcard_value(pattern),
                "case_insensitive": True
            }
        }
    }


def clause_to_elasticsearch(clause: Clause) -> Dict[str, Any]:
    """Translate one compiled clause into an Elasticsearch filter"""

    if clause.op == ClauseOp.ILIKE:
        return _wildcard(clause.field, clause.value)

    if clause.op == ClauseOp.ANY_ILIKE:
        return {
            "bool": {
                "should": [_wildcard(clause.field, pattern) for pattern in clause.value],
                "minimum_should_match": 1
            }
        }

    if clause.op in (ClauseOp.GTE, ClauseOp.LTE):
        return {"range": {clause.field: {clause.op.value: clause.value}}}

    if clause.op == ClauseOp.EQ:
        return {"term": {clause.field: clause.value}}

    raise ValueError(f"Unsupported clause operator: {clause.op}")


def build_search_body(compiled: CompiledQuery, limit: int) -> Dict[str, Any]:
    """Build the Elasticsearch request body for a compiled query"""

    filters = [clause_to_elasticsearch(clause) for clause in compiled.clauses]

    body = {
        "query": {
            "bool": {
                "filter": filters
            } if filters else {"must": [{"match_all": {}}]}
        },
        "sort": [{"created_at": {"order": "desc", "unmapped_type": "date"}}],
        "size": limit
    }

    logger.debug(f"Built query: {body}")
    return body
