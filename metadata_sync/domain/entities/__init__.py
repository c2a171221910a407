from metadata_sync.domain.entities.banned_characters import BannedCharacterEntry, BannedCharacterTable
from metadata_sync.domain.entities.fields import FieldDeclaration, FieldsFile, UnifiedField
from metadata_sync.domain.entities.outcomes import (
    FieldResult,
    OutcomeStatus,
    RunSummary,
    SchemaPushResult,
    SyncOutcome,
)

__all__ = [
    "BannedCharacterEntry",
    "BannedCharacterTable",
    "FieldDeclaration",
    "FieldResult",
    "FieldsFile",
    "OutcomeStatus",
    "RunSummary",
    "SchemaPushResult",
    "SyncOutcome",
    "UnifiedField",
]
