from typing import Set

# Runtime primitives spelled out in generated code.
LOAD_FUNCTION: str = "require"
EXPORTS_OBJECT: str = "module.exports"

IGNORE_DIRS: Set[str] = {
    '.git',
    'node_modules',
    'venv',
    '.venv',
    '__pycache__',
    'dist',
    'build',
    '.next',
    'coverage',
    '.idea',
    '.vscode',
    'target',
    'out',
}

IGNORE_FILES: Set[str] = {
    'package-lock.json', 'yarn.lock', 'pnpm-lock.yaml',
}

# Minified bundles are never rewritten even though they end in .js
IGNORE_SUFFIXES: Set[str] = {
    '.min.js', '.d.ts',
}

TRANSFORM_EXTENSIONS: Set[str] = {
    '.js', '.mjs', '.jsx', '.ts', '.tsx',
}

# Parsed with the TSX grammar; everything else uses the TypeScript grammar.
TSX_EXTENSIONS: Set[str] = {
    '.jsx', '.tsx',
}

DEFAULT_MAX_WORKERS: int = 4
FILE_TIMEOUT_SECONDS: float = 5.0
