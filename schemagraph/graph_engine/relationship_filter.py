# schemagraph/graph_engine/relationship_filter.py

from typing import Dict, List, Literal, Tuple

from pydantic import BaseModel, ConfigDict

from schemagraph.graph_engine.models import GraphEdge, RelationshipCategory

# Checked in this order; the first category with a matching keyword wins.
RELATIONSHIP_KEYWORDS: Tuple[Tuple[RelationshipCategory, Tuple[str, ...]], ...] = (
    (RelationshipCategory.OWNER_HISTORY, ("ownerhistory",)),
    (RelationshipCategory.SPATIAL, ("spatial", "structure", "space")),
    (RelationshipCategory.PROPERTIES, ("property", "quantity")),
    (RelationshipCategory.TYPES, ("type", "typedby")),
    (RelationshipCategory.MATERIALS, ("material", "relatingmaterial")),
    (RelationshipCategory.CLASSIFICATIONS, ("classification", "relatingclassification")),
)

RELATIONSHIP_DISPLAY_NAMES: Dict[RelationshipCategory, str] = {
    RelationshipCategory.OWNER_HISTORY: "Owner History",
    RelationshipCategory.SPATIAL: "Spatial Structure",
    RelationshipCategory.PROPERTIES: "Properties",
    RelationshipCategory.TYPES: "Element Types",
    RelationshipCategory.MATERIALS: "Materials",
    RelationshipCategory.CLASSIFICATIONS: "Classifications",
    RelationshipCategory.OTHER: "Other",
}

FilterFlag = Literal[
    "show_owner_history", "show_spatial", "show_properties",
    "show_types", "show_materials", "show_classifications", "show_all",
]

CATEGORY_FLAGS: Dict[RelationshipCategory, str] = {
    RelationshipCategory.OWNER_HISTORY: "show_owner_history",
    RelationshipCategory.SPATIAL: "show_spatial",
    RelationshipCategory.PROPERTIES: "show_properties",
    RelationshipCategory.TYPES: "show_types",
    RelationshipCategory.MATERIALS: "show_materials",
    RelationshipCategory.CLASSIFICATIONS: "show_classifications",
}


class RelationshipFilter(BaseModel):
    """Which relationship categories are visible. `show_all` bypasses the flags."""
    model_config = ConfigDict(frozen=True)

    show_owner_history: bool = True
    show_spatial: bool = True
    show_properties: bool = True
    show_types: bool = True
    show_materials: bool = True
    show_classifications: bool = True
    show_all: bool = True

    def shows(self, category: RelationshipCategory) -> bool:
        if category is RelationshipCategory.OTHER:
            return True
        return getattr(self, CATEGORY_FLAGS[category])

    def toggle(self, flag: FilterFlag) -> "RelationshipFilter":
        """
        Returns a new filter with `flag` flipped. Turning `show_all` on also
        turns every category flag on; turning it off leaves the category flags
        as they are. Flipping a category recomputes `show_all` as the AND of
        the six category flags.
        """
        if flag == "show_all":
            if self.show_all:
                return self.model_copy(update={"show_all": False})
            return RelationshipFilter(**{name: True for name in CATEGORY_FLAGS.values()}, show_all=True)

        if flag not in CATEGORY_FLAGS.values():
            raise ValueError(f"Unknown filter flag: {flag}")
        flags = {name: getattr(self, name) for name in CATEGORY_FLAGS.values()}
        flags[flag] = not flags[flag]
        return RelationshipFilter(**flags, show_all=all(flags.values()))


def classify(edge: GraphEdge) -> RelationshipCategory:
    """Categorizes an edge by keywords found in its id or either anchor."""
    haystacks = (edge.id.lower(), edge.source_anchor.lower(), edge.target_anchor.lower())
    for category, keywords in RELATIONSHIP_KEYWORDS:
        if any(keyword in text for keyword in keywords for text in haystacks):
            return category
    return RelationshipCategory.OTHER


def filter_edges(edges: List[GraphEdge], config: RelationshipFilter) -> List[GraphEdge]:
    if config.show_all:
        return edges
    return [edge for edge in edges if config.shows(classify(edge))]


def relationship_counts(edges: List[GraphEdge]) -> Dict[RelationshipCategory, int]:
    counts = {category: 0 for category in RelationshipCategory}
    for edge in edges:
        counts[classify(edge)] += 1
    return counts


def display_name(category: RelationshipCategory) -> str:
    return RELATIONSHIP_DISPLAY_NAMES[category]


def has_hidden_edges(edges: List[GraphEdge], config: RelationshipFilter) -> bool:
    if config.show_all:
        return False
    return len(filter_edges(edges, config)) < len(edges)


def filter_summary(edges: List[GraphEdge], config: RelationshipFilter) -> str:
    """Short status line for a toolbar, e.g. 'Showing 3 of 5 relationships (2 hidden)'."""
    if config.show_all:
        return f"Showing all {len(edges)} relationships"

    visible = len(filter_edges(edges, config))
    hidden = len(edges) - visible
    if hidden == 0:
        return f"Showing all {len(edges)} relationships"
    return f"Showing {visible} of {len(edges)} relationships ({hidden} hidden)"
