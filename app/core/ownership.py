"""Declarative ownership registry: entity name -> table, id column and owner column."""

from collections.abc import Mapping
from dataclasses import dataclass

from sqlalchemy import MetaData, Table


class OwnershipConfigError(Exception):
    """Raised at startup when the registry does not match the database schema."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class OwnershipRule:
    table: str
    id_column: str
    owner_column: str


class OwnershipRegistry:
    """Immutable mapping of ownership rules, resolved to Table objects by validate()."""

    def __init__(self, rules: Mapping[str, OwnershipRule]) -> None:
        self._rules = dict(rules)
        self._tables: dict[str, Table] = {}

    def __contains__(self, entity: str) -> bool:
        return entity in self._rules

    def entities(self) -> list[str]:
        return sorted(self._rules)

    def rule(self, entity: str) -> OwnershipRule:
        try:
            return self._rules[entity]
        except KeyError:
            raise OwnershipConfigError(f"No ownership rule for entity {entity!r}") from None

    def table(self, entity: str) -> Table:
        """Table for entity; only available after validate()."""
        try:
            return self._tables[entity]
        except KeyError:
            raise OwnershipConfigError(
                f"Ownership registry not validated for entity {entity!r}"
            ) from None

    def validate(self, metadata: MetaData) -> None:
        """Check every rule against the schema; raises OwnershipConfigError on the first mismatch."""
        tables: dict[str, Table] = {}
        for entity, rule in self._rules.items():
            table = metadata.tables.get(rule.table)
            if table is None:
                raise OwnershipConfigError(f"{entity}: unknown table {rule.table!r}")
            for column in (rule.id_column, rule.owner_column):
                if column not in table.c:
                    raise OwnershipConfigError(
                        f"{entity}: table {rule.table!r} has no column {column!r}"
                    )
            tables[entity] = table
        self._tables = tables


RECORD_OWNERSHIP = OwnershipRegistry(
    {
        "students": OwnershipRule("students", "id", "student_frf_owner"),
        "volunteers": OwnershipRule("volunteers", "id", "volunteer_frf_owner"),
        "donors": OwnershipRule("donors", "id", "donor_frf_owner"),
        "board": OwnershipRule("board_members", "id", "board_frf_owner"),
        "projects": OwnershipRule("projects", "id", "project_frf_owner"),
        "finance": OwnershipRule("finance_reports", "id", "finance_report_frf_owner"),
    }
)
