"""Parameterized Statement Builders.

Builders return a finished ``Query(statement, params)`` value and never
execute anything. Placeholders are numbered from the parameter count at the
moment a value is added, so statement text and parameter list stay aligned.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, NamedTuple

from ..core.constants import ErrorMessages
from ..core.exceptions import ValidationError
from ..schemas.job import JobFilter


class Query(NamedTuple):
    """Statement text plus its ordered positional parameters."""
    statement: str
    params: tuple[Any, ...]


def placeholder(index: int) -> str:
    return f":p{index}"


LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Make ``%`` and ``_`` (and the escape character) match literally in LIKE."""
    for char in (LIKE_ESCAPE, "%", "_"):
        term = term.replace(char, LIKE_ESCAPE + char)
    return term


@dataclass(frozen=True)
class SelectBuilder:
    """Immutable SELECT composer.

    ``base`` is a complete SELECT (joins included) whose own placeholders are
    already covered by ``params``. Each ``where`` call returns a new builder
    with one more AND-ed predicate.
    """

    base: str
    params: tuple[Any, ...] = ()
    predicates: tuple[str, ...] = ()

    def where(self, template: str, value: Any) -> SelectBuilder:
        """Add ``template`` (with a ``{}`` slot for the placeholder) bound to ``value``."""
        index = len(self.params) + 1
        return replace(
            self,
            params=self.params + (value,),
            predicates=self.predicates + (template.format(placeholder(index)),)
        )

    def build(self, order_by: str | None = None) -> Query:
        statement = self.base
        if self.predicates:
            statement += " WHERE " + " AND ".join(self.predicates)
        if order_by:
            statement += f" ORDER BY {order_by}"
        return Query(statement, self.params)


def build_job_filter_query(
    base: str,
    criteria: JobFilter,
    username: str,
    order_by: str | None = None
) -> Query:
    """Compose the job search statement.

    The acting username is always parameter 1 (it keys the applications
    join inside ``base``). Present criteria are added in a fixed order:
    minimum salary, minimum equity, then title search.

    Args:
        base: SELECT over jobs aliased ``j`` with a ``:p1`` username join
        criteria: JobFilter
        username: Acting username
        order_by: Optional ORDER BY expression

    Returns:
        Query ready for ConnectionGateway.execute
    """
    builder = SelectBuilder(base, params=(username,))

    if criteria.min_salary is not None:
        builder = builder.where("j.salary >= {}", criteria.min_salary)

    if criteria.min_equity is not None:
        builder = builder.where("j.equity >= {}", criteria.min_equity)

    if criteria.search is not None:
        # Both sides are folded by the database so they agree on non-ASCII text
        builder = builder.where(
            "lower(j.title) LIKE lower(CAST({} AS TEXT)) ESCAPE '\\'",
            f"%{escape_like(criteria.search)}%"
        )

    return builder.build(order_by=order_by)


def build_partial_update(
    table: str,
    fields: Mapping[str, Any],
    key: str,
    key_value: Any,
    returning: str = "*"
) -> Query:
    """Compose an UPDATE that sets exactly ``fields`` on one row.

    Column names are used verbatim; callers must whitelist them.

    Args:
        table: Table to update
        fields: Column -> new value, applied in mapping order
        key: Identifier column
        key_value: Identifier value (bound last)
        returning: RETURNING column list

    Returns:
        Query ready for ConnectionGateway.execute

    Raises:
        ValidationError: If ``fields`` is empty
    """
    if not fields:
        raise ValidationError(ErrorMessages.EMPTY_UPDATE)

    assignments = [
        f"{column} = {placeholder(index)}"
        for index, column in enumerate(fields, start=1)
    ]
    params = (*fields.values(), key_value)

    statement = (
        f"UPDATE {table} SET {', '.join(assignments)} "
        f"WHERE {key} = {placeholder(len(params))} "
        f"RETURNING {returning}"
    )
    return Query(statement, params)
