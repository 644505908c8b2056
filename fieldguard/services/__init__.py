"""External collaborators used by evaluators."""

from fieldguard.services.resolver import (
    DnsMxResolver,
    MxLookupResult,
    MxLookupStatus,
    MxResolver,
    StaticMxResolver,
)

__all__ = ["DnsMxResolver", "MxLookupResult", "MxLookupStatus", "MxResolver", "StaticMxResolver"]
