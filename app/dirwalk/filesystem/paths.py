"""Path normalization relative to the scan root.

Every entry surfaced by the scanner carries two paths: an absolute
path for filesystem calls and a root-relative display path (prefixed
with ".") used for presentation and sorting.
"""

import os
import re

_DOUBLED_SEPARATORS = re.compile(re.escape(os.sep) + "{2,}")


def collapse_separators(path: str) -> str:
    """Collapse runs of path separators into a single separator."""
    return _DOUBLED_SEPARATORS.sub(os.sep, path)


def normalize(child_path: str, scan_root: str) -> tuple[str, str]:
    """Build the display path and full path for a traversed child.

    Relative children ("./x" or "x") are joined onto the scan root;
    absolute children are taken as-is. Doubled separators are collapsed
    in the full path.

    Args:
        child_path: Path encountered during traversal.
        scan_root: Absolute path of the scan root.

    Returns:
        Tuple of (display_path, full_path). The display path is "." for
        the root itself, "./suffix" for paths under the root, and the
        full path verbatim for anything outside it.
    """
    root = collapse_separators(scan_root)
    if len(root) > 1:
        root = root.rstrip(os.sep)

    if os.path.isabs(child_path):
        joined = child_path
    elif child_path in (".", ""):
        joined = root
    else:
        if child_path.startswith("." + os.sep):
            child_path = child_path[2:]
        joined = f"{root}{os.sep}{child_path}"

    full_path = collapse_separators(joined)
    if len(full_path) > 1:
        full_path = full_path.rstrip(os.sep)

    if full_path == root:
        return ".", full_path

    prefix = root if root.endswith(os.sep) else root + os.sep
    if full_path.startswith(prefix):
        return f".{os.sep}{full_path[len(prefix):]}", full_path

    return full_path, full_path
