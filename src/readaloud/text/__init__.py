"""
Text preprocessing: normalization, segmentation and boundary lookup.
"""

from readaloud.text.boundaries import locate, percent_read
from readaloud.text.normalizer import TextNormalizer, normalize
from readaloud.text.segmenter import Boundary, segment_paragraphs, segment_sentences

__all__ = [
    "Boundary",
    "TextNormalizer",
    "locate",
    "normalize",
    "percent_read",
    "segment_paragraphs",
    "segment_sentences",
]
