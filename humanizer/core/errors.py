from __future__ import annotations


class HumanizerError(Exception):
    """Base class for errors raised by the humanization core."""


class NotReadyError(HumanizerError):
    """A backend was used before it finished initializing."""


class InvalidInputError(HumanizerError):
    """A request was rejected before entering the pipeline."""


class PipelineFailure(HumanizerError):
    """An unexpected error inside analysis, selection, rewriting or scoring.

    The owning session has already been marked failed when this is raised.
    """

    def __init__(self, message: str, *, session_id: str) -> None:
        super().__init__(message)
        self.session_id = session_id
