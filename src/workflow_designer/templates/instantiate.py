"""
Template instantiation.

Expands a template into fresh nodes and edges. Pure: every call generates a
new set of ids and the template is never modified.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import List

from ..errors import TemplateInstantiationError
from ..graph.models import WorkflowEdge, WorkflowNode, new_id
from .models import WorkflowTemplate


logger = logging.getLogger(__name__)


@dataclass
class InstantiatedTemplate:
    """Concrete nodes and edges produced from a template."""
    nodes: List[WorkflowNode] = field(default_factory=list)
    edges: List[WorkflowEdge] = field(default_factory=list)


def instantiate_template(template: WorkflowTemplate) -> InstantiatedTemplate:
    """
    Build uniquely-identified nodes and edges from ``template``.

    Raises:
        TemplateInstantiationError: If an edge index is out of range
    """
    node_ids = [new_id() for _ in template.nodes]

    nodes = [
        WorkflowNode(
            id=node_id,
            kind=body.kind,
            position=body.position,
            data=copy.deepcopy(body.data),
        )
        for node_id, body in zip(node_ids, template.nodes)
    ]

    edges = []
    for index, edge in enumerate(template.edges):
        for endpoint in (edge.source_index, edge.target_index):
            if not 0 <= endpoint < len(node_ids):
                raise TemplateInstantiationError(
                    f"Template '{template.id}' edge {index} references "
                    f"node index {endpoint} of {len(node_ids)}"
                )
        edges.append(
            WorkflowEdge(
                id=new_id(),
                source=node_ids[edge.source_index],
                target=node_ids[edge.target_index],
            )
        )

    logger.debug(f"Instantiated template '{template.id}': {len(nodes)} nodes, {len(edges)} edges")
    return InstantiatedTemplate(nodes=nodes, edges=edges)


__all__ = [
    "InstantiatedTemplate",
    "instantiate_template",
]
