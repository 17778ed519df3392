from __future__ import annotations


class SkillRouteError(Exception):
    """Base error carrying a short user-facing message and an envelope code."""

    code = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PathNotFound(SkillRouteError):
    code = "PathNotFound"

    def __init__(self, path_id: str):
        super().__init__(f'Learning path with ID "{path_id}" not found.')
        self.path_id = path_id


class StepNotFound(SkillRouteError):
    code = "StepNotFound"


class JournalEntryRejected(SkillRouteError):
    code = "ValidationError"


class ConfirmationRequired(SkillRouteError):
    code = "ConfirmationRequired"


class OperationInFlight(SkillRouteError):
    code = "InFlight"

    def __init__(self, operation: str):
        super().__init__(f"A {operation} request is already in progress. Please wait for it to finish.")
        self.operation = operation
