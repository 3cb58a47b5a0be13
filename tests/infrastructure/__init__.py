"""
Shared test infrastructure for xtemplate.

Modules:
- file_utils: creating template/data/config files
- rendering_utils: rendering markup strings and inspecting results
- cli_utils: running ``xtemplate.cli`` in a subprocess
"""

from .file_utils import write, write_json
from .rendering_utils import render_html, render_result, render_result_async, tree, count_tags
from .cli_utils import run_cli, jload

__all__ = [
    "write", "write_json",
    "render_html", "render_result", "render_result_async", "tree", "count_tags",
    "run_cli", "jload",
]
