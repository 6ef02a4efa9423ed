from __future__ import annotations


class StateError(ValueError):
    """Saved game state is malformed or does not fit the data model."""
