"""
Newick format parser module for annotated phylogenetic trees.

This module parses Newick strings (with NHX or BEAST-style comments) into
``Node`` trees whose annotations become node traits.
"""

from .newick_parser import (
    parse_newick,
    split_token,
    parse_metadata,
)

__all__ = [
    "parse_newick",
    "split_token",
    "parse_metadata",
]
