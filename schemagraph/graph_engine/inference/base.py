# schemagraph/graph_engine/inference/base.py

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict

from schemagraph.graph_engine.models import Column, ForeignKey, Table

# IFC naming conventions shared by the stock rules.
ENTITY_PREFIX = "Ifc"
RELATIONSHIP_PREFIX = "IfcRel"
DEFAULT_ID_COLUMN = "ifc_id"


class ColumnContext(BaseModel):
    """
    Everything a rule needs to look at one column. The inferrer builds one per
    non-primary-key column and hands it to every registered rule.
    """
    model_config = ConfigDict(frozen=True)

    table: Table
    column: Column
    table_names: Set[str]
    id_columns: Dict[str, str]

    def reference(self, to_table: str) -> Optional[ForeignKey]:
        """Builds an edge to `to_table`, or None when that table does not exist."""
        if to_table not in self.table_names:
            return None
        return ForeignKey(
            from_table=self.table.name,
            from_column=self.column.name,
            to_table=to_table,
            to_column=self.id_columns.get(to_table, DEFAULT_ID_COLUMN),
        )


class BaseInferenceRule(ABC):
    """
    Abstract base class for every naming-convention rule.
    Each rule inspects a ColumnContext and proposes zero or more edges.
    """
    @property
    @abstractmethod
    def name(self) -> str:
        """Unique rule name, used in debug logging."""
        pass

    @abstractmethod
    def infer(self, context: ColumnContext) -> List[ForeignKey]:
        """
        Returns the edges this rule derives from the column. Edges must only
        point at tables present in context.table_names.
        """
        pass
