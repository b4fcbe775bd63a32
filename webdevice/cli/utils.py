from pathlib import Path


def _clean_root_argument(root: Path | None) -> Path | None:
    """Return a sanitized path if the CLI argument was provided."""
    if root is None:
        return None
    return Path(str(root).strip('"\''))


def resolve_root_argument(root_arg: Path | None) -> Path:
    """Resolve the project root, defaulting to the current directory."""
    explicit_root = _clean_root_argument(root_arg)
    if explicit_root:
        return explicit_root.resolve()
    return Path.cwd()
