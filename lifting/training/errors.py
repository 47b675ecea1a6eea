"""Error types for the training progression engine.

Every rejected operation raises one of these and leaves the entity unchanged.
Nothing here is retried internally; retries belong to the caller.

Error codes:
- VALIDATION_ERROR: Malformed input or a precondition on input values failed
- INVALID_PROFILE: Exercise progression profile has impossible bounds
- INVALID_PERFORMANCE: Performance does not describe the week before the target week
- NOT_FOUND: Referenced plan, mesocycle, workout, set or exercise does not exist
- INVALID_TRANSITION: Lifecycle method called from a state that does not permit it
- CONFLICT: Optimistic-concurrency precondition failed at write time
"""


class TrainingError(Exception):
    """Base exception for training engine errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable message
    """

    code = "TRAINING_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(TrainingError):
    """Raised when input is malformed or violates a value constraint."""

    code = "VALIDATION_ERROR"


class InvalidProfileError(ValidationError):
    """Raised when an exercise progression profile is inconsistent."""

    code = "INVALID_PROFILE"


class InvalidPerformanceError(ValidationError):
    """Raised when previous-week performance is not from the preceding week."""

    code = "INVALID_PERFORMANCE"


class NotFoundError(TrainingError):
    """Raised when a referenced entity does not exist.

    Attributes:
        entity: Entity name (e.g. "Workout")
        entity_id: Identifier that was looked up
    """

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id {entity_id} not found")


class InvalidTransitionError(TrainingError):
    """Raised when a lifecycle transition is not allowed from the current state.

    Attributes:
        entity: Entity name (e.g. "Workout")
        current_status: Status the entity was in
        action: Transition that was attempted
    """

    code = "INVALID_TRANSITION"

    def __init__(self, entity: str, current_status: str, action: str, message: str | None = None) -> None:
        self.entity = entity
        self.current_status = current_status
        self.action = action
        super().__init__(message or f"Cannot {action} {entity.lower()} in status '{current_status}'")


class ConflictError(TrainingError):
    """Raised when a concurrent write invalidated the state this operation read."""

    code = "CONFLICT"
