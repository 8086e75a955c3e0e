"""Exception types raised by the evaluation services."""


class RubricConfigError(LookupError):
    """A role family, archetype or rubric level cannot be resolved.

    Fatal for the request; callers never substitute a default.
    """


class EmbeddingError(RuntimeError):
    """The embedding provider failed or returned an unusable vector."""


class AssessmentDataError(LookupError):
    """An assessment is missing, not completed or has no scores to rank."""
