from __future__ import annotations


class ScoringError(Exception):
    """Base class for failures the scoring engine reports to its caller."""


class PreconditionViolation(ScoringError, ValueError):
    """The caller handed the engine input it cannot produce a result for."""


class DraftPreconditionError(PreconditionViolation):
    pass


class BoardLayoutError(PreconditionViolation):
    pass
