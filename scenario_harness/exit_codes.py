"""Map results documents to process exit statuses.

Statuses from 0 to ``MAX_FAILURE_COUNT`` count failed scenarios. Runs with
more failures than that saturate, so callers should treat any nonzero status
as failure rather than rely on the exact count. Statuses above the ceiling
are reserved for runs that could not be counted.
"""

from scenario_harness.models.result import ResultsDocument

SUCCESS = 0
MAX_FAILURE_COUNT = 250
SESSION_FAULT = 252
NO_TESTS_RAN = 253
CONFIGURATION_ERROR = 254


def resolve(document: ResultsDocument) -> int:
    """Return the exit status for a finished run."""
    if not document.tests:
        return NO_TESTS_RAN
    return min(len(document.failed), MAX_FAILURE_COUNT)
