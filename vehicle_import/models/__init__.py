"""Domain models for the vehicle bulk import pipeline.

RawTable (decoder output) -> CandidateRecord (mapper/validator) ->
ImportOutcome (committer), plus the CanonicalField enum they share.
"""

from .candidate import CandidateRecord
from .error_record import ErrorRecord
from .fields import CanonicalField
from .outcome import FailedItem, FailureStage, ImportedItem, ImportOutcome
from .raw_table import RawTable

__all__ = [
    # Field set
    "CanonicalField",
    # Pipeline models
    "RawTable",
    "CandidateRecord",
    # Results
    "ImportOutcome",
    "ImportedItem",
    "FailedItem",
    "FailureStage",
    "ErrorRecord",
]
