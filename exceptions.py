"""Exception hierarchy for roughsketch."""


class RoughSketchError(Exception):
    """Base exception for all roughsketch errors."""

    pass


class SceneError(RoughSketchError):
    """Errors related to reading a scene description."""

    pass


class SceneLoadError(SceneError):
    """Error loading a scene file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load scene '{path}': {reason}")


class ShapeValidationError(SceneError):
    """A shape record cannot be turned into a ShapeDescriptor."""

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid '{kind}' shape: {reason}")


class RenderError(RoughSketchError):
    """A drawing call failed and the render pass was aborted."""

    def __init__(self, index: int, kind: str, reason: str) -> None:
        self.index = index
        self.kind = kind
        self.reason = reason
        super().__init__(f"Rendering shape #{index} ({kind}) failed: {reason}")
