"""Table ordering from foreign keys.

A foreign key on ``from_table`` referencing ``to_table`` means rows of
``from_table`` need rows of ``to_table`` to exist first. Inserts (and
CREATE TABLE) therefore run parents first; deletes (and DROP TABLE) run in
the reverse order.

A self-referencing key (``employees.manager_id -> employees``) orders rows,
not tables, so it does not constrain table order and is skipped.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .ordering import topological_order

__all__ = [
    "ForeignKey",
    "deletion_order",
    "insertion_order",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ForeignKey:
    """Foreign key between two tables.

    Attributes:
        from_table: Referencing (child) table
        to_table: Referenced (parent) table
        name: Constraint name, informational
    """

    from_table: str
    to_table: str
    name: str = ""

    @property
    def is_self_reference(self) -> bool:
        return self.from_table == self.to_table


def _table_dependencies(foreign_keys: Iterable[ForeignKey]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for fk in foreign_keys:
        if fk.is_self_reference:
            logger.debug(
                "Skipping self-referencing foreign key %s on %s",
                fk.name or "<unnamed>",
                fk.from_table,
            )
            continue
        pairs.append((fk.from_table, fk.to_table))
    return pairs


def insertion_order(tables: Sequence[str], foreign_keys: Iterable[ForeignKey]) -> tuple[str, ...]:
    """Tables ordered parents first (safe for INSERT and CREATE TABLE).

    Foreign keys naming a table outside ``tables`` are ignored.

    Raises:
        CycleError: If the foreign keys form a cycle between distinct tables

    Example:
        >>> insertion_order(
        ...     ["phone", "address", "customer"],
        ...     [ForeignKey("phone", "customer"), ForeignKey("address", "customer")],
        ... )
        ('customer', 'phone', 'address')
    """
    return topological_order(tables, _table_dependencies(foreign_keys))


def deletion_order(tables: Sequence[str], foreign_keys: Iterable[ForeignKey]) -> tuple[str, ...]:
    """Tables ordered children first (safe for DELETE and DROP TABLE)."""
    return tuple(reversed(insertion_order(tables, foreign_keys)))
