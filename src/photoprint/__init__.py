"""Top-level package for PhotoPrint.

Provides subpackages:
- photoprint.core – grid config and immutable document model
- photoprint.layout – track sizing, redistribution, auto-arrange
- photoprint.editor – mutation entry points, document store, settings
- photoprint.ingest – photo ingestion (dimension decoding)
- photoprint.output – print geometry compositor and PDF export
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import PackageNotFoundError, version as pkg_version
        return pkg_version("photoprint")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
