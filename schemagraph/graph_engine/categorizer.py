# schemagraph/graph_engine/categorizer.py

from typing import Dict, Iterable, List, Tuple

from pydantic import BaseModel

from schemagraph.graph_engine.inference.base import RELATIONSHIP_PREFIX
from schemagraph.graph_engine.models import EntityCategory, GraphNode

CATEGORY_ORDER: Tuple[EntityCategory, ...] = (
    EntityCategory.SPATIAL,
    EntityCategory.ELEMENTS,
    EntityCategory.TYPES,
    EntityCategory.RELATIONSHIPS,
    EntityCategory.PROPERTIES,
    EntityCategory.CORE,
)

CATEGORY_RANK: Dict[EntityCategory, int] = {category: rank for rank, category in enumerate(CATEGORY_ORDER)}

CATEGORY_DISPLAY_NAMES: Dict[EntityCategory, str] = {
    EntityCategory.SPATIAL: "Spatial Structure",
    EntityCategory.ELEMENTS: "Building Elements",
    EntityCategory.TYPES: "Element Types",
    EntityCategory.RELATIONSHIPS: "Relationships",
    EntityCategory.PROPERTIES: "Properties & Materials",
    EntityCategory.CORE: "Core Entities",
}

# (horizontal, vertical) spacing for the grid layout
CATEGORY_SPACING: Dict[EntityCategory, Tuple[float, float]] = {
    EntityCategory.SPATIAL: (350, 300),
    EntityCategory.ELEMENTS: (320, 250),
    EntityCategory.TYPES: (300, 200),
    EntityCategory.RELATIONSHIPS: (280, 180),
    EntityCategory.PROPERTIES: (300, 200),
    EntityCategory.CORE: (280, 180),
}

SPATIAL_ENTITIES = frozenset({
    "IfcSite", "IfcBuilding", "IfcBuildingStorey", "IfcSpace", "IfcZone",
    "IfcSpatialZone", "IfcSpatialElement", "IfcSpatialStructureElement",
})

ELEMENT_ENTITIES = frozenset({
    "IfcWall", "IfcSlab", "IfcRoof", "IfcDoor", "IfcWindow", "IfcColumn",
    "IfcBeam", "IfcStair", "IfcRailing", "IfcChimney", "IfcFurniture",
    "IfcBuildingElementProxy", "IfcFlowSegment", "IfcFlowTerminal",
    "IfcFlowController", "IfcFlowFitting", "IfcFlowStorageDevice",
    "IfcFlowTreatmentDevice", "IfcDistributionElement", "IfcElectricalElement",
    "IfcStructuralMember", "IfcStructuralConnection",
})

PROPERTY_ENTITIES = frozenset({
    "IfcPropertySet", "IfcElementQuantity", "IfcMaterial", "IfcMaterialLayer",
    "IfcMaterialProfile", "IfcMaterialConstituent", "IfcClassification",
    "IfcClassificationReference", "IfcExternalReference",
})

# Well-known core entities. Listed for reference; anything unmatched is core anyway.
CORE_ENTITIES = frozenset({
    "IfcProject", "IfcApplication", "IfcOwnerHistory", "IfcPerson",
    "IfcOrganization", "IfcPersonAndOrganization", "IfcActorRole",
    "IfcAddress", "IfcTelecomAddress", "IfcPostalAddress",
})

PROPERTY_KEYWORDS = ("Property", "Quantity", "Material", "Classification")


def categorize(table_name: str) -> EntityCategory:
    """Classifies a table name. First matching rule wins; never raises."""
    if table_name in SPATIAL_ENTITIES:
        return EntityCategory.SPATIAL
    if table_name in ELEMENT_ENTITIES:
        return EntityCategory.ELEMENTS
    if table_name.endswith("Type"):
        return EntityCategory.TYPES
    if table_name.startswith(RELATIONSHIP_PREFIX):
        return EntityCategory.RELATIONSHIPS
    if table_name in PROPERTY_ENTITIES:
        return EntityCategory.PROPERTIES
    if any(keyword in table_name for keyword in PROPERTY_KEYWORDS):
        return EntityCategory.PROPERTIES
    return EntityCategory.CORE


class EntityGroup(BaseModel):
    category: EntityCategory
    name: str
    order: int
    nodes: List[GraphNode]


def group_nodes(nodes: Iterable[GraphNode]) -> List[EntityGroup]:
    """
    Partitions nodes by category in display order, sorting ids inside each
    category. Empty categories are left out.
    """
    buckets: Dict[EntityCategory, List[GraphNode]] = {category: [] for category in CATEGORY_ORDER}
    for node in nodes:
        buckets[categorize(node.id)].append(node)

    groups = []
    for rank, category in enumerate(CATEGORY_ORDER, start=1):
        members = sorted(buckets[category], key=lambda node: node.id)
        if members:
            groups.append(EntityGroup(
                category=category,
                name=CATEGORY_DISPLAY_NAMES[category],
                order=rank,
                nodes=members,
            ))
    return groups


def category_spacing(category: EntityCategory) -> Tuple[float, float]:
    return CATEGORY_SPACING[category]
