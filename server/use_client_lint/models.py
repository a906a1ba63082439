from typing import List, Optional, Tuple
from pydantic import BaseModel, Field

from use_client_lint.config import (
    DEFAULT_CLIENT_COMPONENT_NAMESPACES,
    DEFAULT_REACT_PRAGMA,
    RULE_ID,
)


class LintOptions(BaseModel):
    """Options accepted by the `use-client` rule.

    Keys may be given in camelCase (as in an ESLint config) or snake_case.
    Unknown keys are rejected, mirroring the rule's JSON schema.
    """

    allowed_server_hooks: List[str] = Field(default_factory=list, alias="allowedServerHooks")
    # Only accept the directive inside the leading directive prologue.
    strict_directive_position: bool = Field(False, alias="strictDirectivePosition")
    # Treat `prop={handler}` as a callback prop when `handler` is a local function.
    function_identifier_props: bool = Field(True, alias="functionIdentifierProps")
    client_component_namespaces: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CLIENT_COMPONENT_NAMESPACES),
        alias="clientComponentNamespaces",
    )
    react_pragma: str = Field(DEFAULT_REACT_PRAGMA, alias="reactPragma")

    model_config = {
        "populate_by_name": True,
        "extra": "forbid",
    }


class Fix(BaseModel):
    # UTF-8 byte offsets into the linted source: [start, end)
    range: Tuple[int, int]
    text: str


class Diagnostic(BaseModel):
    rule_id: str = Field(RULE_ID, alias="ruleId")
    message_id: str = Field(alias="messageId")
    message: str
    severity: str = "error"
    # 1-based positions, like ESLint's formatter output
    line: int
    column: int
    end_line: int = Field(alias="endLine")
    end_column: int = Field(alias="endColumn")
    fix: Optional[Fix] = None

    model_config = {
        "populate_by_name": True
    }


class FileReport(BaseModel):
    filename: str
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    # Set when the file could not be read or parsed; diagnostics are empty then.
    error: Optional[str] = None
    # Fixed source, only populated when fixes were requested.
    output: Optional[str] = None

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == "error")


class LintReport(BaseModel):
    root: str
    files: List[FileReport] = Field(default_factory=list)
    error_count: int = Field(0, alias="errorCount")
    fixed_count: int = Field(0, alias="fixedCount")

    model_config = {
        "populate_by_name": True
    }


class LintRequest(BaseModel):
    source: str
    filename: str = "module.tsx"
    options: LintOptions = Field(default_factory=LintOptions)
    fix: bool = False


class RuleMeta(BaseModel):
    rule_id: str = Field(RULE_ID, alias="ruleId")
    description: str
    type: str
    recommended: bool
    fixable: str
    messages: dict[str, str]
    options_schema: dict = Field(alias="optionsSchema")

    model_config = {
        "populate_by_name": True
    }
