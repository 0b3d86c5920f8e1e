"""
Text normalization for speech playback.

Turns raw text into speakable text through a fixed, ordered list of pure
rewrite rules. Rule order matters: URLs are rewritten before generic
symbols, whitespace is collapsed before the heading heuristic, and the
punctuation cleanup runs after every rule that can leave stray commas.
"""

import re
from collections.abc import Callable

TextRule = Callable[[str], str]

# Ordered: the first matching entry wins and output is never re-scanned.
# Keys are written with a lowercase first letter, matching is
# case-insensitive on that letter only.
ABBREVIATIONS: dict[str, str] = {
    # Titles
    "mr.": "Mister",
    "mrs.": "Missus",
    "ms.": "Miss",
    "dr.": "Doctor",
    "prof.": "Professor",
    "sr.": "Senior",
    "jr.": "Junior",
    # Units
    "ft.": "feet",
    "lb.": "pound",
    "lbs.": "pounds",
    "oz.": "ounces",
    "km": "kilometers",
    "kg": "kilograms",
    "cm": "centimeters",
    "mm": "millimeters",
    "mph": "miles per hour",
    "kph": "kilometers per hour",
    # Time
    "a.m.": "A M",
    "p.m.": "P M",
    "hr.": "hour",
    "hrs.": "hours",
    "min.": "minutes",
    "sec.": "seconds",
    # Addresses
    "st.": "Street",
    "ave.": "Avenue",
    "blvd.": "Boulevard",
    "rd.": "Road",
    "apt.": "Apartment",
    "mt.": "Mount",
    # Latin
    "e.g.": "for example",
    "i.e.": "that is",
    "etc.": "et cetera",
    "vs.": "versus",
    "cf.": "compare",
    "et al.": "and others",
    "a.k.a.": "also known as",
    "approx.": "approximately",
}

CURRENCY_WORDS: dict[str, str] = {
    "$": "dollars",
    "€": "euros",
    "£": "pounds",
}


def _token_pattern(token: str) -> str:
    """Regex for a table token, case-insensitive on the first letter only."""
    first, rest = token[0], token[1:]
    if first.isalpha():
        head = f"[{first.upper()}{first.lower()}]"
    else:
        head = re.escape(first)
    return head + re.escape(rest)


def _spoken_domain(domain: str) -> str:
    return domain.replace(".", " dot ")


class TextNormalizer:
    """Ordered rule pipeline turning raw text into speakable text"""

    def __init__(self, abbreviations: dict[str, str] | None = None):
        table = ABBREVIATIONS if abbreviations is None else abbreviations
        self.abbreviations = {
            token[0].lower() + token[1:]: spoken
            for token, spoken in table.items()
            if token
        }

        # Precompiled patterns
        self._compile_patterns()

        self.rules: list[tuple[str, TextRule]] = [
            ("whitespace", self.collapse_whitespace),
            ("abbreviations", self.expand_abbreviations),
            ("links", self.rewrite_links),
            ("symbols", self.rewrite_symbols),
            ("headings", self.terminate_headings),
            ("ellipses", self.collapse_ellipses),
            ("dashes", self.replace_dashes),
            ("parentheses", self.flatten_parentheses),
            ("quotes", self.straighten_quotes),
            ("punctuation", self.collapse_punctuation),
            ("numbers", self.rewrite_numbers),
            ("trim", self.trim),
        ]

    def _compile_patterns(self):
        """Compile regex patterns for performance"""
        self.horizontal_ws_pattern = re.compile(r"[^\S\n]+")
        self.excess_newlines_pattern = re.compile(r"\n{3,}")

        if self.abbreviations:
            alternation = "|".join(_token_pattern(t) for t in self.abbreviations)
            # Tokens inside URLs, paths and emails are not whole words
            self.abbreviation_pattern = re.compile(
                rf"(?<![\w./@:])(?:{alternation})(?![\w@])"
            )
        else:
            self.abbreviation_pattern = None

        self.url_pattern = re.compile(
            r"https?://(?P<domain>[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*)"
            r"(?::\d+)?(?:[/?#][^\s\"'<>“”‘’]*?)?"
            r"(?=[.,!?;:)\]\"'>“”‘’]*(?:[\s\"'<>“”‘’;]|\Z))",
            re.IGNORECASE,
        )
        self.email_pattern = re.compile(
            r"(?<![\w.%+-])(?P<local>[A-Za-z0-9._%+-]+)"
            r"@(?P<domain>[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)+)"
        )

        self.ampersand_pattern = re.compile(r"[^\S\n]*&[^\S\n]*")
        self.mention_pattern = re.compile(r"(?<!\w)@(\w+)")
        self.hashtag_pattern = re.compile(r"(?<!\w)#(\w+)")
        self.plus_pattern = re.compile(r"(\w?)\+(?=\d)")
        self.percent_pattern = re.compile(r"(\d)[^\S\n]*%")
        self.currency_pattern = re.compile(r"(\w?)([$€£])[^\S\n]?(?=\d)")

        self.heading_pattern = re.compile(r"([^\s.!?:;,])(?=[^\S\n]*\n[\s]*[A-Z])")
        self.ellipsis_pattern = re.compile(r"\.{3,}")
        self.dash_pattern = re.compile(
            r"[^\S\n]*[—–][^\S\n]*|[^\S\n]+-{1,2}[^\S\n]+"
        )
        self.parenthesis_pattern = re.compile(r"[^\S\n]*[()][^\S\n]*")

        self.double_comma_pattern = re.compile(r",(?:[^\S\n]*,)+")
        self.comma_period_pattern = re.compile(r",[^\S\n]*\.")
        self.double_period_pattern = re.compile(r"\.[^\S\n]+\.")

        self.thousands_pattern = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")
        self.fraction_pattern = re.compile(r"(?<![\d/])(\d+)/(\d+)(?![\d/])")

        self.leading_comma_pattern = re.compile(r"\A[\s,]+")

    def collapse_whitespace(self, text: str) -> str:
        """Collapse horizontal whitespace and runs of 3+ newlines"""
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = self.horizontal_ws_pattern.sub(" ", text)
        return self.excess_newlines_pattern.sub("\n\n", text)

    def expand_abbreviations(self, text: str) -> str:
        """Expand table abbreviations to their spoken form"""
        if self.abbreviation_pattern is None:
            return text

        def handle_abbreviation(match):
            token = match.group(0)
            return self.abbreviations[token[0].lower() + token[1:]]

        return self.abbreviation_pattern.sub(handle_abbreviation, text)

    def rewrite_links(self, text: str) -> str:
        """Speak URLs as their domain and emails as ``local at domain``"""

        def handle_url(match):
            return f"link to {_spoken_domain(match.group('domain'))}"

        def handle_email(match):
            return f"{match.group('local')} at {_spoken_domain(match.group('domain'))}"

        text = self.url_pattern.sub(handle_url, text)
        return self.email_pattern.sub(handle_email, text)

    def rewrite_symbols(self, text: str) -> str:
        """Replace symbols with speakable equivalents"""

        def handle_plus(match):
            return f"{match.group(1)} plus " if match.group(1) else "plus "

        def handle_currency(match):
            prefix = f"{match.group(1)} " if match.group(1) else ""
            return f"{prefix}{CURRENCY_WORDS[match.group(2)]} "

        text = self.ampersand_pattern.sub(" and ", text)
        text = self.mention_pattern.sub(r"at \1", text)
        text = self.hashtag_pattern.sub(r"hashtag \1", text)
        text = self.plus_pattern.sub(handle_plus, text)
        text = self.percent_pattern.sub(r"\1 percent", text)
        return self.currency_pattern.sub(handle_currency, text)

    def terminate_headings(self, text: str) -> str:
        """End unpunctuated lines followed by a capitalized line with a period"""
        return self.heading_pattern.sub(r"\1.", text)

    def collapse_ellipses(self, text: str) -> str:
        return self.ellipsis_pattern.sub("...", text)

    def replace_dashes(self, text: str) -> str:
        return self.dash_pattern.sub(", ", text)

    def flatten_parentheses(self, text: str) -> str:
        return self.parenthesis_pattern.sub(", ", text)

    def straighten_quotes(self, text: str) -> str:
        return (
            text.replace("“", '"')
            .replace("”", '"')
            .replace("‘", "'")
            .replace("’", "'")
        )

    def collapse_punctuation(self, text: str) -> str:
        """Remove doubled punctuation left behind by earlier rules"""
        text = self.double_comma_pattern.sub(",", text)
        text = self.comma_period_pattern.sub(".", text)
        return self.double_period_pattern.sub(".", text)

    def rewrite_numbers(self, text: str) -> str:
        """Drop thousands separators and speak ``a/b`` as ``a of b``"""
        text = self.thousands_pattern.sub("", text)
        return self.fraction_pattern.sub(r"\1 of \2", text)

    def trim(self, text: str) -> str:
        """Strip surrounding whitespace and a leading pause comma"""
        return self.leading_comma_pattern.sub("", text).strip()

    def normalize(self, text: str) -> str:
        """Normalize text for speech"""
        if not text or not text.strip():
            return ""

        for _name, rule in self.rules:
            text = rule(text)
        return text


_default_normalizer = TextNormalizer()


def normalize(raw: str) -> str:
    """Normalize raw text into speakable text with the default rule set."""
    return _default_normalizer.normalize(raw)
