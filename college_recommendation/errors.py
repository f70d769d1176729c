"""
Collaborator failures raised to the recommendation engine.

Expected no-result conditions are returned as EmptyState data, not raised.
"""


class CandidateProviderError(Exception):
    """The candidate source could not be reached or returned an error."""


class CandidateProviderTimeout(CandidateProviderError):
    """The candidate source did not answer in time."""


class AICompletionError(Exception):
    """The completion provider failed, timed out or returned nothing."""
