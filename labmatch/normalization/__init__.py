from labmatch.normalization.models import NormalizedReading
from labmatch.normalization.name_resolver import NameResolution, NameResolver
from labmatch.normalization.normalizer import ReadingNormalizer
from labmatch.normalization.text import TextFolder

__all__ = ["NameResolution", "NameResolver", "NormalizedReading", "ReadingNormalizer", "TextFolder"]
