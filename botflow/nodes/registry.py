"""
Node Catalog.

Immutable lookup of node type definitions. A catalog is built once and
passed to the graph model, form engine and wire codec.
"""

import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..config import NodeCategory
from ..models import ConfigField, NodeDefinition
from .definitions import ALL_NODES

logger = logging.getLogger(__name__)


class NodeCatalog:
    """
    Read-only registry of node type definitions.

    Provides lookup, category listing and search over the palette.
    Unknown type ids never raise here: lookups return None and schema
    lookups return an empty schema.
    """

    def __init__(self, definitions: Iterable[NodeDefinition]):
        nodes: Dict[str, NodeDefinition] = {}
        by_category: Dict[NodeCategory, List[NodeDefinition]] = {}

        for node_def in definitions:
            if node_def.id in nodes:
                raise ValueError(f"Duplicate node type: {node_def.id}")
            nodes[node_def.id] = node_def
            by_category.setdefault(node_def.category, []).append(node_def)

        self._nodes: Mapping[str, NodeDefinition] = nodes
        self._by_category: Mapping[NodeCategory, Tuple[NodeDefinition, ...]] = {
            category: tuple(defs) for category, defs in by_category.items()
        }

        logger.debug(f"Catalog built with {len(self._nodes)} node types")

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def lookup(self, type_id: str) -> Optional[NodeDefinition]:
        """Get node definition by type id."""
        return self._nodes.get(type_id)

    def schema_for(self, type_id: str) -> Tuple[ConfigField, ...]:
        """Configuration schema of a type; empty for unknown types."""
        node_def = self._nodes.get(type_id)
        if node_def is None:
            logger.debug(f"No schema for unknown node type: {type_id}")
            return ()
        return node_def.config_schema

    def category_of(self, type_id: str) -> Optional[NodeCategory]:
        node_def = self._nodes.get(type_id)
        return node_def.category if node_def else None

    def list_all(self) -> List[NodeDefinition]:
        """List all registered node definitions."""
        return list(self._nodes.values())

    def list_by_category(self, category: NodeCategory) -> List[NodeDefinition]:
        """List nodes in a specific category."""
        return list(self._by_category.get(category, ()))

    def categories(self) -> List[NodeCategory]:
        """Categories with at least one node, in declaration order."""
        return [c for c in NodeCategory if c in self._by_category]

    def search(self, term: str, category: Optional[NodeCategory] = None) -> List[NodeDefinition]:
        """Search nodes by display name or description (case-insensitive)."""
        term = term.strip().lower()
        candidates = (
            self.list_by_category(category) if category is not None else self._nodes.values()
        )

        return [
            node_def
            for node_def in candidates
            if term in node_def.name.lower() or term in node_def.description.lower()
        ]

    def to_catalog(self) -> Dict[str, List[Dict]]:
        """
        Export the catalog organized by category.

        Returns:
            Dict mapping category names to lists of node definitions
        """
        return {
            category.value: [n.to_dict() for n in self._by_category[category]]
            for category in self.categories()
        }


@lru_cache
def default_catalog() -> NodeCatalog:
    """Catalog of the built-in node types."""
    catalog = NodeCatalog(ALL_NODES)
    logger.info(f"Registered {len(catalog)} node types")
    return catalog
