# council/utils/__init__.py
"""
Parsing and markdown utilities.
"""
from .parser import (
    parse_frontmatter,
    dump_frontmatter,
    ParsedDocument,
    FallbackProfile,
    IDEA_PROFILE,
    JUDGE_PROFILE,
)

__all__ = [
    "parse_frontmatter", "dump_frontmatter", "ParsedDocument",
    "FallbackProfile", "IDEA_PROFILE", "JUDGE_PROFILE",
]
