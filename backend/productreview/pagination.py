"""
Page requests and sort parsing for list queries.

Sort expressions use the `field,direction` form the mobile client sends
(e.g. `averageRating,desc`, `createdAt`). Secondary keys follow after `;`
(`name,desc;id,asc`) or in a repeated parameter. Field names are accepted
in camelCase or snake_case.
"""
import os
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

from .exceptions import ValidationError

DEFAULT_PAGE_SIZE = int(os.getenv('DEFAULT_PAGE_SIZE', '10'))
MAX_PAGE_SIZE = int(os.getenv('MAX_PAGE_SIZE', '100'))


@dataclass(frozen=True)
class SortOrder:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int
    sort: Tuple[SortOrder, ...]

    @property
    def offset(self):
        return self.page * self.size

    @classmethod
    def of(
        cls,
        page: Optional[int] = 0,
        size: Optional[int] = None,
        sort: Union[str, Sequence[str], None] = None,
        allowed: Iterable[str] = (),
        default_sort: str = 'id,asc',
    ) -> 'PageRequest':
        page = 0 if page is None else page
        size = DEFAULT_PAGE_SIZE if size is None else size
        if page < 0:
            raise ValidationError("page must be >= 0", {"page": page})
        if size < 1 or size > MAX_PAGE_SIZE:
            raise ValidationError(f"size must be between 1 and {MAX_PAGE_SIZE}", {"size": size})
        orders = parse_sort(sort, allowed) or parse_sort(default_sort, allowed)
        return cls(page=page, size=size, sort=tuple(orders))


def normalize_field(name: str) -> str:
    """snake_case -> camelCase; camelCase passes through."""
    head, *rest = name.strip().split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def parse_sort(sort: Union[str, Sequence[str], None], allowed: Iterable[str] = ()):
    """Parse `field[,asc|desc]` expressions into SortOrder items.

    Unknown fields (when `allowed` is given) and unknown directions raise ValidationError.
    """
    if not sort:
        return []
    if isinstance(sort, str):
        sort = [sort]
    allowed = set(allowed)
    orders = []
    # `name,desc;id,asc` and a repeated parameter are equivalent
    exprs = [part for value in sort if value for part in value.split(';')]
    for expr in exprs:
        if not expr or not expr.strip():
            continue
        field, _, direction = expr.partition(',')
        field = normalize_field(field)
        direction = direction.strip().lower() or 'asc'
        if direction not in ('asc', 'desc'):
            raise ValidationError(f"Unknown sort direction '{direction}'", {"sort": expr})
        if allowed and field not in allowed:
            raise ValidationError(
                f"Cannot sort by '{field}'",
                {"sort": expr, "allowed": sorted(allowed)},
            )
        orders.append(SortOrder(field=field, descending=direction == 'desc'))
    return orders


def order_by_clauses(orders: Iterable[SortOrder], columns: Mapping[str, object], tiebreaker: str = 'id'):
    """Map sort orders onto SQLAlchemy columns.

    A tiebreaker on the primary key is appended (in the direction of the first
    key) so page boundaries stay stable when sort values repeat.
    """
    orders = list(orders)
    clauses = []
    for order in orders:
        column = columns[order.field]
        clauses.append(column.desc() if order.descending else column.asc())
    if not any(order.field == tiebreaker for order in orders):
        column = columns[tiebreaker]
        descending = orders[0].descending if orders else False
        clauses.append(column.desc() if descending else column.asc())
    return clauses
