from typing import Set, Tuple

RULE_ID = "use-client"

DIRECTIVE = "use client"
# Text inserted by the fixer. The trailing blank line separates it from the code.
DIRECTIVE_STATEMENT = "'use client';"

# `useId` is the only built-in hook that also works in Server Components.
SERVER_SAFE_HOOKS: Set[str] = {"useId"}

# Roots of third-party JSX namespaces whose components always need the client,
# e.g. <motion.div> from framer-motion.
DEFAULT_CLIENT_COMPONENT_NAMESPACES: Tuple[str, ...] = ("motion",)

DEFAULT_REACT_PRAGMA = "React"

CONFIG_FILE_NAMES: Tuple[str, ...] = (
    ".use-client-lint.json",
    "use-client-lint.json",
)

# ESLint applies fixes repeatedly until the output stops changing.
MAX_FIX_PASSES = 10

# Seconds a worker may spend on a single file during a project scan.
FILE_TIMEOUT_SECONDS = 10.0

IGNORE_DIRS: Set[str] = {
    '.git',
    'node_modules',
    'venv',
    '.venv',
    '__pycache__',
    'dist',
    'build',
    '.next',
    '.turbo',
    '.vercel',
    'coverage',
    '.idea',
    '.vscode',
    'out',
}

IGNORE_FILES: Set[str] = {
    'package-lock.json', 'yarn.lock', 'pnpm-lock.yaml',
}

TYPESCRIPT_SUFFIXES: Set[str] = {'.ts', '.mts', '.cts'}
TSX_SUFFIXES: Set[str] = {'.tsx', '.js', '.jsx', '.mjs', '.cjs'}
SOURCE_SUFFIXES: Set[str] = TYPESCRIPT_SUFFIXES | TSX_SUFFIXES
