"""Overlap analysis between a new pattern and already stored breadcrumbs.

For every existing record the analyzer reports at most one relation, using
the first check that succeeds:

    exact     normalized paths are identical
    subset    the existing pattern covers the new pattern's literal path
    superset  the new pattern covers the existing pattern's literal path
    intersect at least one side is a glob and disjointness can't be proven

The disjointness proof is a heuristic. It only answers PROVEN_DISJOINT when
one of its rules shows that no real path can match both patterns; anything
else is POSSIBLY_INTERSECTING, so over-warning is possible but a real
intersection is never hidden.
"""

import posixpath
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from shared_types import Disjointness, OverlapKind, PatternKind

from .globbing import literal_prefix
from .matcher import PathMatcher
from .paths import depth_below, is_ancestor_or_equal
from .patterns import PatternSpec

_GLOB_META = re.compile(r"[*?\[]")
_EXTENSION = re.compile(r"\*\.(\w+)$")


class HasPattern(Protocol):
    id: str

    @property
    def pattern(self) -> PatternSpec: ...


@dataclass(frozen=True)
class OverlapRelation:
    existing_id: str
    kind: OverlapKind
    path: str
    pattern_type: PatternKind

    def to_dict(self) -> dict:
        return {
            "id": self.existing_id,
            "path": self.path,
            "pattern_type": str(self.pattern_type),
            "overlap_type": str(self.kind),
        }


def _glob_text(pattern: PatternSpec) -> str:
    """Glob text as the matcher sees it, without a trailing separator."""
    text = pattern.text
    return text.rstrip("/") if len(text) > 1 else text


def _glob_base_cut(text: str) -> int:
    """Index of the '/' ending the literal directory part of a glob, or -1."""
    _, meta = literal_prefix(text)
    return text.rfind("/", 0, len(text) if meta is None else meta)


def base_directory(pattern: PatternSpec) -> Optional[str]:
    """Literal directory every match of pattern lives in, if one is known."""
    text = pattern.text

    if pattern.kind is PatternKind.EXACT:
        return posixpath.dirname(text) or "."

    if pattern.kind is PatternKind.DIRECTORY:
        return text.rstrip("/") or "/"

    text = _glob_text(pattern)
    if "/" not in text:
        # Bare globs match basenames at any depth
        return None
    literal, meta = literal_prefix(text)
    if "\\" in literal:
        # An escaped backslash can't be told apart from a separator later on
        return None
    if meta is None:
        return posixpath.dirname(literal) or "."
    cut = literal.rfind("/")
    return literal[:cut] if cut > 0 else None


def depth_range(pattern: PatternSpec) -> tuple[int, Optional[int]]:
    """(min, max) number of segments a match adds below base_directory().

    max is None for unbounded patterns. A directory's own path (depth 0)
    is left out: the literal-path checks run before any disjointness proof.
    """
    if pattern.kind is PatternKind.EXACT:
        return 1, 1
    if pattern.kind is PatternKind.DIRECTORY:
        return 1, None

    text = _glob_text(pattern)
    cut = _glob_base_cut(text)
    rest = text[cut + 1:] if cut > 0 else text
    segments = [s for s in rest.split("/") if s and s != "."]
    fixed = [s for s in segments if s != "**"]
    if len(fixed) != len(segments):
        return len(fixed), None
    return len(fixed), len(fixed)


def extension_of(pattern: PatternSpec) -> Optional[str]:
    """The 'ext' of a trailing literal '*.ext', if any."""
    match = _EXTENSION.search(pattern.text)
    return match.group(1) if match else None


def filename_glob(pattern: PatternSpec) -> Optional[str]:
    """Final path segment, but only when it contains wildcards."""
    name = _glob_text(pattern).rsplit("/", 1)[-1]
    return name if _GLOB_META.search(name) else None


def _literal_prefix(name: str) -> str:
    return literal_prefix(name)[0]


def _ranges_overlap(a: tuple[int, Optional[int]], b: tuple[int, Optional[int]]) -> bool:
    low = max(a[0], b[0])
    highs = [h for h in (a[1], b[1]) if h is not None]
    return not highs or low <= min(highs)


class OverlapAnalyzer:
    """Classifies how a new pattern relates to stored breadcrumb patterns."""

    def __init__(self, matcher: PathMatcher):
        self.matcher = matcher

    def classify_pair(self, new: PatternSpec, existing: PatternSpec) -> Optional[OverlapKind]:
        if self.matcher.pattern_key(new) == self.matcher.pattern_key(existing):
            return OverlapKind.EXACT
        if self.matcher.matches(existing, new.raw):
            return OverlapKind.SUBSET
        if self.matcher.matches(new, existing.raw):
            return OverlapKind.SUPERSET
        if PatternKind.GLOB in (new.kind, existing.kind):
            if self.prove_disjoint(new, existing) is Disjointness.POSSIBLY_INTERSECTING:
                return OverlapKind.INTERSECT
        return None

    def find_overlaps(self, new: PatternSpec, existing: Iterable[HasPattern]) -> list[OverlapRelation]:
        relations = []
        for record in existing:
            spec = record.pattern
            kind = self.classify_pair(new, spec)
            if kind is not None:
                relations.append(
                    OverlapRelation(
                        existing_id=record.id,
                        kind=kind,
                        path=spec.raw,
                        pattern_type=spec.kind,
                    )
                )
        return relations

    def prove_disjoint(self, a: PatternSpec, b: PatternSpec) -> Disjointness:
        """Try to show no path can match both a and b.

        Assumes the literal paths of a and b were already checked against
        each other (see classify_pair).
        """
        if self._disjoint_by_directory(a, b):
            return Disjointness.PROVEN_DISJOINT

        ext_a, ext_b = extension_of(a), extension_of(b)
        if ext_a and ext_b and ext_a != ext_b:
            return Disjointness.PROVEN_DISJOINT

        name_a, name_b = filename_glob(a), filename_glob(b)
        if name_a and name_b and name_a != "*" and name_b != "*":
            prefix_a, prefix_b = _literal_prefix(name_a), _literal_prefix(name_b)
            if (
                prefix_a
                and prefix_b
                and not prefix_a.startswith(prefix_b)
                and not prefix_b.startswith(prefix_a)
            ):
                return Disjointness.PROVEN_DISJOINT

        return Disjointness.POSSIBLY_INTERSECTING

    def _disjoint_by_directory(self, a: PatternSpec, b: PatternSpec) -> bool:
        base_a, base_b = base_directory(a), base_directory(b)
        if base_a is None or base_b is None:
            return False

        dir_a = self.matcher.normalize(base_a)
        dir_b = self.matcher.normalize(base_b)
        range_a, range_b = depth_range(a), depth_range(b)

        if is_ancestor_or_equal(dir_a, dir_b):
            shift = depth_below(dir_a, dir_b)
            shallow, deep = range_a, range_b
        elif is_ancestor_or_equal(dir_b, dir_a):
            shift = depth_below(dir_b, dir_a)
            shallow, deep = range_b, range_a
        else:
            # Neither base contains the other
            return True

        # Compare depths below the shallower base
        deep_shifted = (deep[0] + shift, None if deep[1] is None else deep[1] + shift)
        return not _ranges_overlap(shallow, deep_shifted)
