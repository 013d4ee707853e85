# schemagraph/graph_engine/inference/inferrer.py

import logging
from typing import Dict, List

from schemagraph.graph_engine.inference.base import BaseInferenceRule, ColumnContext
from schemagraph.graph_engine.inference.stock.naming_rules import (
    CommonRelationshipNameRule, EntityReferenceRule, RelatingRelatedRule,
)
from schemagraph.graph_engine.inference.stock.spatial_rule import SpatialContainerRule
from schemagraph.graph_engine.inference.stock.suffix_rule import IdSuffixRule
from schemagraph.graph_engine.models import ForeignKey, SchemaDef

logger = logging.getLogger(__name__)


class RelationshipInferrer:
    """
    Recovers relationships the database never declared, from IFC column naming
    conventions. Inferred edges are for visualization only.

    Rules run independently and additively: a column matching several rules
    yields one edge per match, even when two rules reach the same table.
    """
    def __init__(self):
        self._rules: List[BaseInferenceRule] = []
        self._load_stock_rules()

    def _load_stock_rules(self):
        """Registers the built-in rules in their fixed evaluation order."""
        self.register_rule(IdSuffixRule())
        self.register_rule(CommonRelationshipNameRule())
        self.register_rule(RelatingRelatedRule())
        self.register_rule(EntityReferenceRule())
        self.register_rule(SpatialContainerRule())

    def register_rule(self, rule: BaseInferenceRule):
        """Appends a custom rule after the ones already registered."""
        logger.debug("Registering inference rule: %s", rule.name)
        self._rules.append(rule)

    @property
    def rules(self) -> List[BaseInferenceRule]:
        return list(self._rules)

    def infer(self, schema: SchemaDef) -> List[ForeignKey]:
        """
        Returns the inferred edges for `schema` without modifying it.

        Tables are visited in schema order, columns in stored order and rules
        in registration order, so the result is identical on every call.
        """
        table_names = schema.table_names()
        id_columns: Dict[str, str] = {}
        for table in schema.tables:
            pk_columns = table.primary_key_columns()
            if pk_columns:
                id_columns[table.name] = pk_columns[0].name

        inferred: List[ForeignKey] = []
        for table in schema.tables:
            for column in table.columns:
                if column.is_primary_key:
                    continue

                # inputs are already validated schema objects
                context = ColumnContext.model_construct(
                    table=table, column=column, table_names=table_names, id_columns=id_columns,
                )
                for rule in self._rules:
                    for edge in rule.infer(context):
                        if edge.to_table not in table_names:
                            logger.warning("Rule %s proposed a dangling edge to '%s'; dropped", rule.name, edge.to_table)
                            continue
                        logger.debug(
                            "[%s] %s.%s -> %s.%s",
                            rule.name, edge.from_table, edge.from_column, edge.to_table, edge.to_column,
                        )
                        inferred.append(edge)

        logger.info("Inferred %d relationships across %d tables", len(inferred), len(schema.tables))
        return inferred

    def enhance(self, schema: SchemaDef) -> SchemaDef:
        """
        Returns a new schema whose foreign keys are the declared ones followed
        by the inferred ones. The input schema is left as it was.
        """
        inferred = self.infer(schema)
        return SchemaDef(
            tables=list(schema.tables),
            foreign_keys=list(schema.foreign_keys) + inferred,
        )
