from fastapi import APIRouter, HTTPException, Query
from pathlib import Path

from use_client_lint.config import RULE_ID
from use_client_lint.models import FileReport, LintReport, LintRequest, LintOptions, RuleMeta
from use_client_lint.services import linter, project_scan
from use_client_lint.services.options import ConfigError, load_options
from use_client_lint.services.parsing import SourceParseError
from use_client_lint.services.report import MESSAGES, RULE_DESCRIPTION

router = APIRouter(prefix="/api/lint", tags=["lint"])


@router.post("", response_model=FileReport)
async def lint_source(request: LintRequest):
    """
    Lint a single module sent in the request body.

    With `fix`, `output` holds the fixed source and `diagnostics` what is left
    after fixing.
    """
    try:
        if request.fix:
            output, diagnostics = linter.fix_source(request.source, request.filename, request.options)
            return FileReport(
                filename=request.filename,
                diagnostics=diagnostics,
                output=output if output != request.source else None,
            )
        diagnostics = linter.lint_source(request.source, request.filename, request.options)
    except SourceParseError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return FileReport(filename=request.filename, diagnostics=diagnostics)


def _options_for(target: Path) -> LintOptions:
    if not target.exists():
        raise HTTPException(status_code=404, detail="Path not found")
    try:
        return load_options(start=target)
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/path", response_model=LintReport)
async def lint_path(path: str = Query(..., description="File or directory to lint")):
    """Lint files on disk without touching them."""
    target = Path(path)
    return project_scan.lint_paths([target], _options_for(target))


@router.post("/path/fix", response_model=LintReport)
async def fix_path(path: str = Query(..., description="File or directory to fix in place")):
    """Apply fixes to files on disk and report what is left."""
    target = Path(path)
    return project_scan.lint_paths([target], _options_for(target), fix=True)


@router.get("/rule", response_model=RuleMeta)
async def get_rule():
    """Rule metadata in the shape of an ESLint rule's `meta`."""
    return RuleMeta(
        rule_id=RULE_ID,
        description=RULE_DESCRIPTION,
        type="problem",
        recommended=True,
        fixable="code",
        messages=MESSAGES,
        options_schema=LintOptions.model_json_schema(by_alias=True),
    )
