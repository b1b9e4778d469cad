"""Institution specific statement extractors."""

from statex.domain.security import SecurityService
from statex.extractors.base import Extractor
from statex.extractors.score_priority import ScorePriorityExtractor

EXTRACTOR_CLASSES = [
    ScorePriorityExtractor,
]


def default_extractors(securities: SecurityService) -> list[Extractor]:
    """Create every known extractor, in classification priority order."""
    return [extractor_class(securities) for extractor_class in EXTRACTOR_CLASSES]


__all__ = ["Extractor", "ScorePriorityExtractor", "default_extractors"]
