# schemagraph/graph_engine/inference/stock/naming_rules.py

import re
from typing import List

from schemagraph.graph_engine.inference.base import (
    BaseInferenceRule, ColumnContext, ENTITY_PREFIX, RELATIONSHIP_PREFIX,
)
from schemagraph.graph_engine.models import ForeignKey

# Attribute names that IFC resolves through an objectified relationship table.
COMMON_RELATIONSHIP_NAMES = (
    "OwnerHistory",
    "GlobalId",
    "ContainedInStructure",
    "DefinedByProperties",
    "IsTypedBy",
    "HasAssociations",
    "RelatingObject",
    "RelatedObjects",
)

# Attribute names that usually hold a reference to an entity of the same name.
ENTITY_REFERENCE_NAMES = (
    "OwnerHistory",
    "GlobalId",
    "ObjectPlacement",
    "Representation",
    "PredefinedType",
    "ObjectType",
    "Material",
    "Classification",
    "ContainedInStructure",
    "DefinedByProperties",
    "IsTypedBy",
    "HasAssociations",
    "RelatingObject",
    "RelatedObjects",
)

RELATING_MARKER = re.compile(r"Relating|Related")


class CommonRelationshipNameRule(BaseInferenceRule):
    """OwnerHistory -> IfcRelOwnerHistory, IsTypedBy -> IfcRelIsTypedBy, ..."""

    @property
    def name(self) -> str:
        return "CommonRelationshipName"

    def infer(self, context: ColumnContext) -> List[ForeignKey]:
        if context.column.name not in COMMON_RELATIONSHIP_NAMES:
            return []
        edge = context.reference(RELATIONSHIP_PREFIX + context.column.name)
        return [edge] if edge else []


class RelatingRelatedRule(BaseInferenceRule):
    """RelatingStructure -> IfcStructure, RelatedObjects -> IfcObjects."""

    @property
    def name(self) -> str:
        return "RelatingRelated"

    def infer(self, context: ColumnContext) -> List[ForeignKey]:
        column_name = context.column.name
        if "Relating" not in column_name and "Related" not in column_name:
            return []

        # only the first marker is removed
        entity = RELATING_MARKER.sub("", column_name, count=1)
        if not entity:
            return []
        edge = context.reference(ENTITY_PREFIX + entity)
        return [edge] if edge else []


class EntityReferenceRule(BaseInferenceRule):
    """OwnerHistory -> IfcOwnerHistory, ObjectPlacement -> IfcObjectPlacement, ..."""

    @property
    def name(self) -> str:
        return "EntityReference"

    def infer(self, context: ColumnContext) -> List[ForeignKey]:
        if context.column.name not in ENTITY_REFERENCE_NAMES:
            return []
        edge = context.reference(ENTITY_PREFIX + context.column.name)
        return [edge] if edge else []
