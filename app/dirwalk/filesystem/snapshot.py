"""Subtree snapshots taken before a directory is deleted.

A snapshot is the flat, pre-order list of every descendant of a
directory: directory markers, regular files with their bytes, and
symbolic links with their targets. Restoring a snapshot recreates the
tree shape and file contents; other metadata (permissions, timestamps,
ownership) is not preserved.
"""

import logging
import os
from pathlib import Path

from dirwalk.errors import FilesystemIOError, ResourceLimitExceededError, from_os_error
from dirwalk.filesystem.models import EntryType, SnapshotNode

logger = logging.getLogger(__name__)

MAX_SNAPSHOT_NODES = 1000


def capture(dir_path: str | Path, *, max_nodes: int = MAX_SNAPSHOT_NODES) -> list[SnapshotNode]:
    """Recursively capture the contents of a directory.

    The node limit is shared across the whole recursive capture, not
    applied per directory. A file that cannot be read is still recorded
    (with content=None); a child whose metadata cannot be read is
    skipped.

    Args:
        dir_path: Directory to capture.
        max_nodes: Maximum number of nodes in the snapshot.

    Returns:
        Snapshot nodes in pre-order (each directory marker precedes its
        descendants).

    Raises:
        FilesystemIOError: If dir_path itself cannot be opened.
        ResourceLimitExceededError: If the subtree has more than
            max_nodes descendants.
    """
    root = Path(dir_path)
    try:
        children = list(root.iterdir())
    except OSError as e:
        raise FilesystemIOError(f"Cannot open directory {root}: {e.strerror or e}") from e

    nodes: list[SnapshotNode] = []
    _capture_children(children, nodes, max_nodes)
    logger.debug("Captured %d snapshot nodes under %s", len(nodes), root)
    return nodes


def _capture_children(children: list[Path], nodes: list[SnapshotNode], max_nodes: int) -> None:
    for child in children:
        try:
            st = child.lstat()
        except OSError as e:
            logger.warning("Cannot stat %s during capture: %s", child, e.strerror or e)
            continue

        if len(nodes) >= max_nodes:
            raise ResourceLimitExceededError("snapshot nodes", max_nodes)

        entry_type = EntryType.from_mode(st.st_mode)
        path = str(child)

        if entry_type == EntryType.DIRECTORY:
            nodes.append(SnapshotNode(path=path, entry_type=entry_type))
            try:
                grandchildren = list(child.iterdir())
            except OSError as e:
                logger.warning("Cannot open directory %s during capture: %s", child, e)
                continue
            _capture_children(grandchildren, nodes, max_nodes)
        elif entry_type == EntryType.LINK:
            nodes.append(
                SnapshotNode(path=path, entry_type=entry_type, link_target=_read_link(child))
            )
        elif entry_type == EntryType.FILE:
            nodes.append(SnapshotNode(path=path, entry_type=entry_type, content=_read_bytes(child)))
        else:
            nodes.append(SnapshotNode(path=path, entry_type=entry_type))


def _read_bytes(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except OSError as e:
        logger.warning("Cannot read %s during capture: %s", path, e.strerror or e)
        return None


def _read_link(path: Path) -> str | None:
    try:
        return os.readlink(path)
    except OSError as e:
        logger.warning("Cannot read link %s during capture: %s", path, e.strerror or e)
        return None


def restore_order(nodes: list[SnapshotNode]) -> list[SnapshotNode]:
    """Order nodes so that every directory precedes its descendants.

    Sorting by path depth is stable, so siblings keep their recorded
    order.
    """
    return sorted(nodes, key=lambda node: len(Path(node.path).parts))


def restore(nodes: list[SnapshotNode] | tuple[SnapshotNode, ...]) -> list[str]:
    """Recreate a captured subtree.

    Directories are created with default permissions (existing ones are
    kept), symlinks are recreated, and files are truncated and rewritten
    with their captured content. Special files and links whose target
    was not captured are skipped. Restore is not atomic: a failure
    partway through leaves a partially restored subtree.

    Args:
        nodes: Snapshot nodes, in any order.

    Returns:
        Paths of the nodes that were skipped.

    Raises:
        DirwalkError: If a node cannot be recreated.
    """
    skipped: list[str] = []
    for node in restore_order(list(nodes)):
        if not node.restorable:
            logger.warning("Cannot recreate %s %s", node.entry_type.value, node.path)
            skipped.append(node.path)
            continue
        try:
            if node.is_dir:
                os.makedirs(node.path, mode=0o755, exist_ok=True)
            elif node.is_link:
                if not os.path.lexists(node.path):
                    os.symlink(node.link_target, node.path)
            else:
                with open(node.path, "wb") as f:
                    if node.content is not None:
                        f.write(node.content)
        except OSError as e:
            raise from_os_error(e, "restore") from e
    return skipped
