"""Exceptions raised while rendering a document tree."""


class MarkupError(Exception):
    """Base error for markup rendering."""

    pass


class StructuralError(MarkupError):
    """The document tree is too deep or contains a cycle."""

    def __init__(self, message: str, depth: int = 0) -> None:
        super().__init__(message)
        self.depth = depth
