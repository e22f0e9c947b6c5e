"""
Domain models - single source of truth for all entities.

Design principles:
- Every entity defined once
- Validation at the boundary
- Storage-agnostic (repositories handle credential persistence)
"""

from .base import BaseEntity, TimestampMixin
from .credentials import (
    ProviderId,
    CredentialSet,
    KEY_PATTERNS,
    PROVIDER_LABELS,
    is_valid_key,
    mask_key,
)
from .classification import Language, SophisticationLevel, Category, Classification, DEFAULT_CATEGORY
from .discourse import (
    NodeKind,
    Perspective,
    PERSPECTIVE_DESCRIPTIONS,
    ThesisNode,
    SessionState,
    new_node_id,
)
from .compass import CompassRun, PhaseAnalysis

__all__ = [
    # Base
    "BaseEntity",
    "TimestampMixin",
    # Credentials
    "ProviderId",
    "CredentialSet",
    "KEY_PATTERNS",
    "PROVIDER_LABELS",
    "is_valid_key",
    "mask_key",
    # Classification
    "Language",
    "SophisticationLevel",
    "Category",
    "Classification",
    "DEFAULT_CATEGORY",
    # Discourse
    "NodeKind",
    "Perspective",
    "PERSPECTIVE_DESCRIPTIONS",
    "ThesisNode",
    "SessionState",
    "new_node_id",
    # Compass
    "CompassRun",
    "PhaseAnalysis",
]
