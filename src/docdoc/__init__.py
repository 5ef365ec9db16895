"""
DocDoc - include-directive document stitcher

DocDoc flattens a tree of line-oriented text documents connected by
``#[docdoc:path="..."]`` directives into a single output stream, and can
watch every file in the include tree to re-render on change.
"""

__version__ = "0.3.0"
__all__ = ["__version__"]
