"""dirwalk - Interactive directory-tree browser with undoable mutations."""

__version__ = "0.1.0"
