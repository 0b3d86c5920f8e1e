"""
Tests for sentence and paragraph segmentation.
"""

import pytest

from readaloud.text.normalizer import normalize
from readaloud.text.segmenter import Boundary, segment_paragraphs, segment_sentences

SAMPLES = [
    "",
    " ",
    "x",
    ".",
    "\n\n",
    "No terminator here",
    "Wow!!! Really?",
    "Heading\nBody text. More text!\n\nNext paragraph.\n",
    "1234 5678 !!! ???",
    "a\n\n\n\nb",
]


def test_two_sentences():
    text = normalize("Dr. Smith went home. He was tired.")
    sentences = segment_sentences(text)

    assert len(sentences) == 2
    assert sentences[0].slice(text) == "Doctor Smith went home. "
    assert sentences[1].slice(text) == "He was tired."


def test_terminator_run_is_greedy():
    assert segment_sentences("Wow!!! Really?") == [Boundary(0, 7), Boundary(7, 14)]


def test_decimal_point_does_not_end_sentence():
    assert segment_sentences("3.14 is pi. Yes") == [Boundary(0, 12), Boundary(12, 15)]


def test_newline_before_capital_ends_sentence():
    assert segment_sentences("Heading\nBody text") == [Boundary(0, 8), Boundary(8, 17)]
    assert segment_sentences("first line\nsecond") == [Boundary(0, 17)]


def test_newline_before_quote_ends_sentence():
    assert segment_sentences('He said\n"Go"') == [Boundary(0, 8), Boundary(8, 12)]


def test_unterminated_text_is_one_sentence():
    assert segment_sentences("No terminator here") == [Boundary(0, 18)]


@pytest.mark.parametrize("text", ["", "   ", "."])
def test_degenerate_sentence_input(text):
    assert segment_sentences(text) == [Boundary(0, len(text))]


def test_paragraphs_split_on_blank_and_single_newlines():
    text = "First para.\n\nSecond para.\nThird."
    assert segment_paragraphs(text) == [
        Boundary(0, 11),
        Boundary(13, 25),
        Boundary(26, 32),
    ]


def test_empty_paragraphs_dropped():
    assert segment_paragraphs("a\n\n\n\nb") == [Boundary(0, 1), Boundary(5, 6)]
    assert segment_paragraphs("a\n \nb") == [Boundary(0, 1), Boundary(4, 5)]


def test_trailing_delimiter_absorbed_into_last_paragraph():
    assert segment_paragraphs("Para\n") == [Boundary(0, 5)]


@pytest.mark.parametrize("text", ["", "x", "\n\n"])
def test_degenerate_paragraph_input(text):
    assert segment_paragraphs(text) == [Boundary(0, len(text))]


@pytest.mark.parametrize("text", SAMPLES)
def test_sentences_cover_text_contiguously(text):
    sentences = segment_sentences(text)

    assert sentences
    assert sentences[0].start == 0
    assert sentences[-1].end == len(text)
    for current, following in zip(sentences, sentences[1:]):
        assert current.end == following.start


@pytest.mark.parametrize("text", SAMPLES)
def test_paragraphs_are_ordered_and_reach_end(text):
    paragraphs = segment_paragraphs(text)

    assert paragraphs
    assert paragraphs[-1].end == len(text)
    for boundary in paragraphs:
        assert boundary.start <= boundary.end
    for current, following in zip(paragraphs, paragraphs[1:]):
        assert current.end <= following.start


def test_boundary_contains():
    boundary = Boundary(3, 6)
    assert 3 in boundary
    assert 5 in boundary
    assert 6 not in boundary
    assert boundary.length == 3
