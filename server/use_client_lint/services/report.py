"""
Turns detection signals into at most one diagnostic per module.

A module without the directive gets a single insertion diagnostic for the
first signal found. A module with the directive gets a removal diagnostic
only when the whole traversal produced no signal at all.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from tree_sitter import Node

from use_client_lint.models import Diagnostic, Fix
from use_client_lint.services.directive import ModuleInfo, insertion_fix, removal_fix

logger = logging.getLogger(__name__)


class SignalKind(str, Enum):
    BROWSER_API_CONSTRUCT = "browser-api-construct"
    BROWSER_API_MEMBER = "browser-api-member"
    CLIENT_HOOK = "client-hook"
    CLIENT_HOOK_STATEMENT = "client-hook-statement"
    CALLBACK_PROP = "callback-prop"
    CLASS_COMPONENT = "class-component"
    THIRD_PARTY_CLIENT_COMPONENT = "third-party-client-component"


@dataclass(frozen=True, eq=False)
class Signal:
    kind: SignalKind
    node: Node
    name: Optional[str] = None


REMOVE_MESSAGE_ID = "removeUseClient"

MESSAGES: Dict[str, str] = {
    "addUseClientHooks": (
        '{hook} only works in Client Components. Add the "use client" directive at the top of the file to use it.'
    ),
    "addUseClientBrowserAPI": (
        'Browser APIs only work in Client Components. Add the "use client" directive at the top of the file to use it.'
    ),
    "addUseClientCallbacks": (
        "Functions can only be passed as props to Client Components. "
        'Add the "use client" directive at the top of the file to use it.'
    ),
    "addUseClientClassComponent": (
        "React Class Components can only be used in Client Components. "
        'Add the "use client" directive at the top of the file.'
    ),
    "addUseClientThirdPartyComponent": (
        '{component} only works in Client Components. Add the "use client" directive at the top of the file to use it.'
    ),
    REMOVE_MESSAGE_ID: "This file does not require the 'use client' directive, and it should be removed.",
}

MESSAGE_IDS: Dict[SignalKind, str] = {
    SignalKind.BROWSER_API_CONSTRUCT: "addUseClientBrowserAPI",
    SignalKind.BROWSER_API_MEMBER: "addUseClientBrowserAPI",
    SignalKind.CLIENT_HOOK: "addUseClientHooks",
    SignalKind.CLIENT_HOOK_STATEMENT: "addUseClientHooks",
    SignalKind.CALLBACK_PROP: "addUseClientCallbacks",
    SignalKind.CLASS_COMPONENT: "addUseClientClassComponent",
    SignalKind.THIRD_PARTY_CLIENT_COMPONENT: "addUseClientThirdPartyComponent",
}

RULE_DESCRIPTION = "Enforce components are appropriately labeled with 'use client'."


def format_message(message_id: str, name: Optional[str] = None) -> str:
    name = name or ""
    return MESSAGES[message_id].format(hook=name, component=name)


def make_diagnostic(message_id: str, node: Node, name: Optional[str] = None, fix: Optional[Fix] = None) -> Diagnostic:
    return Diagnostic(
        message_id=message_id,
        message=format_message(message_id, name),
        line=node.start_point.row + 1,
        column=node.start_point.column + 1,
        end_line=node.end_point.row + 1,
        end_column=node.end_point.column + 1,
        fix=fix,
    )


@dataclass
class ReportState:
    is_client_component: bool
    has_reported_diagnostic: bool = False
    signals: List[Signal] = field(default_factory=list)


class ReportController:
    def __init__(self, module: ModuleInfo):
        self.module = module
        self.state = ReportState(is_client_component=module.has_directive)
        self.diagnostics: List[Diagnostic] = []

    def observe(self, signal: Signal) -> None:
        self.state.signals.append(signal)
        logger.debug("Signal %s (%s) at %s", signal.kind.value, signal.name, signal.node.start_point)
        if self.state.is_client_component or self.state.has_reported_diagnostic:
            return
        self.state.has_reported_diagnostic = True
        self.diagnostics.append(
            make_diagnostic(MESSAGE_IDS[signal.kind], signal.node, signal.name, insertion_fix(self.module))
        )

    def finish(self) -> None:
        """Called once the whole module has been traversed."""
        directive = self.module.directive
        if directive is None or self.state.signals:
            logger.debug("Module kept as is: %d signal(s)", len(self.state.signals))
            return
        logger.debug("Directive not needed at line %d", directive.start_point.row + 1)
        self.diagnostics.append(make_diagnostic(REMOVE_MESSAGE_ID, directive, fix=removal_fix(directive)))
