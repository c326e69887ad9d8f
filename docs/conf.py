"""Sphinx build settings for the issue ledger API reference."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from issue_ledger import __version__  # noqa: E402

project = "Issue Ledger"
author = "Issue Ledger contributors"
version = release = __version__

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_autodoc_typehints",
]

exclude_patterns = ["_build"]
html_theme = "sphinx_rtd_theme"

# Records are pydantic models; hide the machinery pydantic adds to every class.
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "exclude-members": "model_config, model_fields, model_computed_fields",
}
autodoc_typehints = "description"

napoleon_google_docstring = True
napoleon_numpy_docstring = False
