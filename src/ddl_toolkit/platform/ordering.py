"""Foreign-key dependency ordering of tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from ddl_toolkit.model.elements import fold

if TYPE_CHECKING:
    from ddl_toolkit.model.database import Database
    from ddl_toolkit.model.elements import ForeignKey
    from ddl_toolkit.model.table import Table


class CreationPlan(NamedTuple):
    """Table creation order plus the foreign keys that must wait for all tables."""

    tables: list[Table]
    deferred: list[tuple[Table, ForeignKey]]

    def is_deferred(self, table: Table, foreign_key: ForeignKey) -> bool:
        """Whether the foreign key is emitted after all tables exist."""
        return any(
            table is deferred_table and foreign_key is deferred_key
            for deferred_table, deferred_key in self.deferred
        )


def _dependencies(
    database: Database,
    *,
    case_sensitive: bool,
) -> dict[str, list[str]]:
    """Map each table key to the keys of the tables it references."""
    known = {fold(table.name, case_sensitive=case_sensitive) for table in database.tables}
    graph: dict[str, list[str]] = {}
    for table in database.tables:
        key = fold(table.name, case_sensitive=case_sensitive)
        targets = graph.setdefault(key, [])
        for foreign_key in table.foreign_keys:
            target = fold(foreign_key.foreign_table, case_sensitive=case_sensitive)
            if target != key and target in known and target not in targets:
                targets.append(target)
    return graph


def _reachable(graph: dict[str, list[str]], start: str) -> set[str]:
    seen: set[str] = set()
    stack = list(graph.get(start, []))
    while stack:
        node = stack.pop()
        if node in seen:
            continue
        seen.add(node)
        stack.extend(graph.get(node, []))
    return seen


def plan_creation(
    database: Database,
    *,
    case_sensitive: bool = False,
    forward_references: bool = False,
) -> CreationPlan:
    """Order tables so every table follows the tables it references.

    Foreign keys that close a cycle (their target can reach back to their own
    table) are deferred and the remaining graph is sorted, preferring model order
    among tables that are ready. With ``forward_references`` the model order is
    kept and nothing is deferred.

    Args:
        database: Model to order
        case_sensitive: Whether table names are compared exactly
        forward_references: Whether the dialect accepts references to tables
            that do not exist yet

    Returns:
        The creation order and the deferred foreign keys in creation order

    """
    if forward_references:
        return CreationPlan(list(database.tables), [])

    graph = _dependencies(database, case_sensitive=case_sensitive)
    reach = {key: _reachable(graph, key) for key in graph}

    def closes_cycle(source: str, target: str) -> bool:
        return source in reach.get(target, set())

    acyclic = {
        key: [target for target in targets if not closes_cycle(key, target)]
        for key, targets in graph.items()
    }

    ordered: list[Table] = []
    created: set[str] = set()
    remaining = list(database.tables)
    while remaining:
        for position, table in enumerate(remaining):
            key = fold(table.name, case_sensitive=case_sensitive)
            if all(target in created for target in acyclic.get(key, [])):
                break
        else:
            position = 0
        table = remaining.pop(position)
        ordered.append(table)
        created.add(fold(table.name, case_sensitive=case_sensitive))

    deferred: list[tuple[Table, ForeignKey]] = []
    for table in ordered:
        key = fold(table.name, case_sensitive=case_sensitive)
        for foreign_key in table.foreign_keys:
            target = fold(foreign_key.foreign_table, case_sensitive=case_sensitive)
            if target != key and closes_cycle(key, target):
                deferred.append((table, foreign_key))
    return CreationPlan(ordered, deferred)
