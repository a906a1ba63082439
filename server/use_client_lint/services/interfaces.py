"""Capabilities the detection rule needs from its front end."""
from typing import Optional, Protocol

from tree_sitter import Node

from use_client_lint.services.scope_analysis import Scope


class ScopeProvider(Protocol):
    module_scope: Scope

    def scope_for(self, node: Node) -> Scope:
        ...


class ComponentBoundaryResolver(Protocol):
    def parent_component(self, node: Node) -> Optional[Node]:
        ...


class ClassComponentClassifier(Protocol):
    def is_class_component(self, node: Node) -> bool:
        ...
