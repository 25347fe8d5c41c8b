"""Schema version handling.

Versions are compared with ``packaging``; rule applicability is written as
specifier strings (``>=2.1.0``, ``<2.2.0``) or caret ranges (``^2.2.0``).
"""

from __future__ import annotations

import re
from functools import lru_cache

from packaging.specifiers import SpecifierSet
from packaging.version import InvalidVersion, Version

ALLOWED_VERSIONS = ["2.0.0", "2.1.0", "2.2.0"]

_COERCE_RE = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def coerce_version(version: str) -> str:
    """Coerce loose version strings ("v2.2", " 2 ") to ``major.minor.patch``.

    Strings without any digits are returned unchanged so they can be
    reported as unrecognised.
    """
    match = _COERCE_RE.search(version or "")
    if match is None:
        return version
    major, minor, patch = (int(part or 0) for part in match.groups())
    return f"{major}.{minor}.{patch}"


def is_allowed_version(version: str) -> bool:
    return version in ALLOWED_VERSIONS


def _caret_to_specifier(spec: str) -> str:
    base = Version(spec[1:])
    if base.major > 0:
        upper = f"{base.major + 1}.0.0"
    else:
        upper = f"0.{base.minor + 1}.0"
    return f">={base},<{upper}"


@lru_cache(maxsize=64)
def _specifier(spec: str) -> SpecifierSet:
    spec = spec.strip()
    if spec.startswith("^"):
        spec = _caret_to_specifier(spec)
    return SpecifierSet(spec)


def version_applies(version: str, spec: str) -> bool:
    """Return True when *version* satisfies the applicability range *spec*."""
    try:
        parsed = Version(version)
    except InvalidVersion as e:
        raise ValueError(f"Invalid schema version: {version!r}") from e
    return parsed in _specifier(spec)


def version_at_least(version: str, minimum: str) -> bool:
    return Version(version) >= Version(minimum)
