"""Build artifact caching for slugkeep.

- Wholesale directory cache for compiled build outputs
- Content fingerprints deciding whether cached outputs are still valid

Key features:
- Async file I/O using core.io FileSystem
- Atomic commit pattern (tree + meta)
- Miss-on-error semantics (corrupt entry -> cache miss)
"""

from slugkeep.core.caching.backends.fs import FSArtifactCache
from slugkeep.core.caching.backends.null import NullArtifactCache
from slugkeep.core.caching.fingerprint import ContentFingerprinter, TreeFingerprinter
from slugkeep.core.caching.models import CacheMeta
from slugkeep.core.caching.protocols import ArtifactCache

__all__ = [
    # Core
    "ArtifactCache",
    "CacheMeta",
    # Backends
    "FSArtifactCache",
    "NullArtifactCache",
    # Fingerprinting
    "ContentFingerprinter",
    "TreeFingerprinter",
]
