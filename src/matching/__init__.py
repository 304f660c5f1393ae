from .globbing import INCLUDE_HIDDEN, GlobSyntaxError, expand_glob, glob_match, validate_glob
from .matcher import PathMatcher, matches_path
from .overlap import OverlapAnalyzer, OverlapRelation
from .patterns import PatternSpec, classify

__all__ = [
    "INCLUDE_HIDDEN",
    "GlobSyntaxError",
    "OverlapAnalyzer",
    "OverlapRelation",
    "PathMatcher",
    "PatternSpec",
    "classify",
    "expand_glob",
    "glob_match",
    "matches_path",
    "validate_glob",
]
