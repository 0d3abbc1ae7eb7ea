# Store exceptions


class StoreError(Exception):
    """A store transaction failed to open, execute or commit."""


class FatalStartupError(RuntimeError):
    """The store could not be opened or its schema could not be created."""
