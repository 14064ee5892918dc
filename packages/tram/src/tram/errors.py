"""
Error types raised by the TrAM engine.

InvalidParameterError:      caller passed something unusable. Fails fast.
InternalInconsistencyError: bookkeeping invariant broken. A defect, not bad data.

Tracks that are too short are not errors: compute() returns NaN for them.
"""


class InvalidParameterError(ValueError):
    """Bad knot count, mismatched lengths, empty corpus, malformed groups."""


class InternalInconsistencyError(RuntimeError):
    """Missing scale factor or weight/data key mismatch."""


__all__ = ['InvalidParameterError', 'InternalInconsistencyError']
