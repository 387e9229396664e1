"""Core session, undo, configuration and state management for dirwalk."""
