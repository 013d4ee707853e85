# schemagraph/graph_engine/models.py

from enum import Enum
from typing import List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntityCategory(str, Enum):
    """Domain buckets for tables, in display order."""
    SPATIAL = "spatial"
    ELEMENTS = "elements"
    TYPES = "types"
    RELATIONSHIPS = "relationships"
    PROPERTIES = "properties"
    CORE = "core"


class RelationshipCategory(str, Enum):
    OWNER_HISTORY = "ownerhistory"
    SPATIAL = "spatial"
    PROPERTIES = "properties"
    TYPES = "types"
    MATERIALS = "materials"
    CLASSIFICATIONS = "classifications"
    OTHER = "other"


class LayoutAlgorithm(str, Enum):
    HIERARCHICAL = "hierarchical"
    FORCE = "force"
    CIRCULAR = "circular"
    GRID = "grid"


class Column(BaseModel):
    """Represents a single column as reported by the database."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "TEXT"
    not_null: bool = False
    is_primary_key: bool = False
    default_value: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value):
        return value or "TEXT"


class Table(BaseModel):
    """Represents a table and its columns in introspection order."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    columns: List[Column] = Field(default_factory=list)

    def primary_key_columns(self) -> List[Column]:
        return [column for column in self.columns if column.is_primary_key]

    def display_columns(self) -> List[Column]:
        """Primary keys first, then by name. The stored order is left untouched."""
        return sorted(self.columns, key=lambda column: (not column.is_primary_key, column.name))


class ForeignKey(BaseModel):
    """A declared or inferred column-to-column reference between two tables."""
    model_config = ConfigDict(frozen=True)

    from_table: str = Field(..., min_length=1)
    from_column: str = Field(..., min_length=1)
    to_table: str = Field(..., min_length=1)
    to_column: str = Field(..., min_length=1)

    def as_tuple(self) -> Tuple[str, str, str, str]:
        return (self.from_table, self.from_column, self.to_table, self.to_column)


class SchemaDef(BaseModel):
    """Represents the entire extracted schema. Never mutated once built."""
    model_config = ConfigDict(frozen=True)

    tables: List[Table] = Field(default_factory=list)
    foreign_keys: List[ForeignKey] = Field(default_factory=list)

    def table_names(self) -> Set[str]:
        return {table.name for table in self.tables}

    def get_table(self, name: str) -> Optional[Table]:
        return next((table for table in self.tables if table.name == name), None)


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class GraphNode(BaseModel):
    """One table on the canvas. Position is owned by the layout engine and store."""
    id: str
    category: EntityCategory
    table: Table
    position: Position = Field(default_factory=Position)

    def with_position(self, x: float, y: float) -> "GraphNode":
        return self.model_copy(update={"position": Position(x=x, y=y)})


class GraphEdge(BaseModel):
    """One foreign key drawn between two column anchors."""
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    source_anchor: str
    target_anchor: str
    label: str = ""
    foreign_key: Optional[ForeignKey] = None

    @property
    def relationship_category(self) -> RelationshipCategory:
        from schemagraph.graph_engine.relationship_filter import classify
        return classify(self)
