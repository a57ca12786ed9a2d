"""
In-memory tabular results
=========================

`DataSet` is what `DatabaseContext.execute_query(...)` and the atomic `query(...)`
helper return: zero or more `DataTable`s fully materialized in memory, so they
remain usable after the connection that produced them is closed.

An empty `DataSet` (no tables) is also what `query(...)` returns when the
underlying command fails.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class DataTable(BaseModel):
    """
    One materialized result set.

    Attributes
    ----------
    name : str
        Table name inside its data set (`"Table"`, `"Table1"`, ...).
    columns : list[str]
        Column names in result order.
    rows : list[tuple]
        Row values in result order.
    """

    name: str = "Table"
    columns: List[str] = Field(default_factory=list)
    rows: List[Tuple[Any, ...]] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def records(self) -> List[Dict[str, Any]]:
        """Rows as column → value dictionaries."""
        return [dict(zip(self.columns, row)) for row in self.rows]


class DataSet(BaseModel):
    """A collection of `DataTable`s."""

    tables: List[DataTable] = Field(default_factory=list)

    @property
    def table(self) -> Optional[DataTable]:
        """The first table, or None when the set is empty."""
        return self.tables[0] if self.tables else None

    @property
    def is_empty(self) -> bool:
        return not self.tables

    def add_table(self, columns: List[str], rows: List[Tuple[Any, ...]]) -> DataTable:
        """Append a table named after its position, the way data adapters fill a set."""
        name = "Table" if not self.tables else f"Table{len(self.tables)}"
        table = DataTable(name=name, columns=columns, rows=rows)
        self.tables.append(table)
        return table
