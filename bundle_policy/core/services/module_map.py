"""
Module map service — a naive Haste-like map from module name to file.

Scans glob patterns and maps every discovered file's basename (minus
``.js``) to its absolute path, so the bundler can alias bare module
names to their actual disk location.

Basename collisions are accepted: a later match silently replaces an
earlier one.  The only side effect is the optional per-file
``extract_errors`` hook.
"""

from __future__ import annotations

import fnmatch
import glob
import itertools
import logging
import os
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from bundle_policy.core.data import get_registry
from bundle_policy.core.models.layout import ProjectLayout
from bundle_policy.core.models.variant import BundleVariant, unhandled_variant

logger = logging.getLogger(__name__)

ErrorExtractor = Callable[[str], None]
FileDiscovery = Callable[[str, Path, Sequence[str]], Iterable[str]]


def get_excluded_globs() -> list[str]:
    """Patterns for test, mock, and benchmark sources."""
    return list(get_registry().excluded_globs)


def _pattern_variants(pattern: str) -> set[str]:
    """Expand ``**/`` into its zero-directory and any-directory forms.

    ``fnmatch`` treats ``*`` as crossing ``/``, so ``**/`` already covers
    one-or-more directories; dropping it covers zero.
    """
    pieces = pattern.split("**/")
    variants = set()
    for keep in itertools.product(("**/", ""), repeat=len(pieces) - 1):
        joined = pieces[0]
        for sep, piece in zip(keep, pieces[1:]):
            joined += sep + piece
        variants.add(joined)
    return variants


def matches_glob(path: str, pattern: str) -> bool:
    """Check a POSIX-style path against a glob with ``**`` semantics."""
    return any(fnmatch.fnmatchcase(path, p) for p in _pattern_variants(pattern))


def discover_files(pattern: str, root: Path, exclude: Sequence[str]) -> list[str]:
    """Default file discovery: recursive glob minus excluded patterns.

    Relative patterns are evaluated against ``root``.  Returned paths are
    relative to ``root`` for relative patterns, absolute otherwise.

    Raises:
        FileNotFoundError: If ``root`` is not a directory.
    """
    if not root.is_dir():
        raise FileNotFoundError(f"Pattern root is not a directory: {root}")

    found: list[str] = []
    for match in sorted(glob.glob(pattern, root_dir=root, recursive=True)):
        posix = Path(match).as_posix()
        if any(matches_glob(posix, ex) for ex in exclude):
            continue
        if not (root / match).is_file():
            continue
        found.append(match)
    return found


def _module_name(file: str) -> str:
    name = Path(file).name
    return name[:-3] if name.endswith(".js") else name


def _drop_reserved_names(module_map: dict[str, str], variant: BundleVariant) -> dict[str, str]:
    """Remove names the platform resolves through its own external path."""
    match variant:
        case BundleVariant.FB_DEV | BundleVariant.FB_PROD:
            reserved = set(get_registry().platform_reserved_modules)
            return {k: v for k, v in module_map.items() if k not in reserved}
        case (
            BundleVariant.UMD_DEV
            | BundleVariant.UMD_PROD
            | BundleVariant.NODE_DEV
            | BundleVariant.NODE_PROD
            | BundleVariant.RN_DEV
            | BundleVariant.RN_PROD
        ):
            return module_map
        case _:
            unhandled_variant(variant)


def create_module_map(
    paths: Sequence[str],
    variant: BundleVariant,
    *,
    extract_errors: ErrorExtractor | None = None,
    exclude: Sequence[str] | None = None,
    layout: ProjectLayout | None = None,
    discover: FileDiscovery | None = None,
) -> dict[str, str]:
    """Build the module name → absolute path map for ``paths``.

    Args:
        paths: Glob patterns, scanned in order.
        variant: Bundle variant; FB variants drop the reserved platform names.
        extract_errors: Optional hook invoked with each discovered file.
        exclude: Exclusion globs (default: ``get_excluded_globs()``).
        layout: Project layout providing the root (default: context root).
        discover: File discovery collaborator (default: ``discover_files``).

    Returns:
        Fresh dict; later matches win on basename collisions.
    """
    layout = layout or ProjectLayout()
    variant = BundleVariant.parse(variant)
    exclude = get_excluded_globs() if exclude is None else list(exclude)
    discover = discover or discover_files

    module_map: dict[str, str] = {}
    for pattern in paths:
        files = list(discover(pattern, layout.root, exclude))
        logger.debug("Pattern %s matched %d files", pattern, len(files))
        for file in files:
            resolved = os.path.abspath(layout.root / file)
            if extract_errors is not None:
                extract_errors(resolved)
            name = _module_name(file)
            if name in module_map and module_map[name] != resolved:
                logger.debug(
                    "Module name '%s' collides: %s replaces %s",
                    name, resolved, module_map[name],
                )
            module_map[name] = resolved

    return _drop_reserved_names(module_map, variant)
