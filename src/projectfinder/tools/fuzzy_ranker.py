"""
Fuzzy path ranking for the Project Finder.

Scores candidate paths against a typed query with an fzf-style subsequence
matcher and returns them best-first. Scoring rewards consecutive characters
and matches that begin a path segment, so ``index`` ranks ``src/index.ts``
above ``abc/src_index.ts``.

Query syntax (whitespace separates atoms; every atom must match):

    foo     fuzzy subsequence
    'foo    substring
    ^foo    prefix
    foo$    suffix
    ^foo$   exact
    !foo    candidate must not contain foo (combines with ^ and $)

A leading ``\\`` escapes ``^``, ``'`` or ``!``; ``\\$`` escapes a trailing ``$``.
"""

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from operator import itemgetter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models.config import RankingConfig
from ..models.search_results import MatchResult


SCORE_MATCH = 16
PENALTY_GAP_START = 3
PENALTY_GAP_EXTENSION = 1

BONUS_SEGMENT = 10
BONUS_DELIMITER = 8
BONUS_CAMEL = 7
BONUS_CONSECUTIVE = 4
BONUS_FIRST_CHAR_MULTIPLIER = 2

# Extra score for matches starting at index 0, 1, ... decaying to nothing.
# Must stay below 2 * (BONUS_SEGMENT - BONUS_DELIMITER).
PREFIX_BONUS = 3

# Upper bound on memoized (previous, current) character pair bonuses.
MAX_PAIR_CACHE = 65536


class AtomKind(Enum):
    """How a single query atom is matched against a candidate."""
    FUZZY = "fuzzy"
    SUBSTRING = "substring"
    PREFIX = "prefix"
    POSTFIX = "postfix"
    EXACT = "exact"


@dataclass(frozen=True)
class Atom:
    """One whitespace-separated piece of a query, already normalized."""
    needle: str
    kind: AtomKind = AtomKind.FUZZY
    negate: bool = False
    regex: Optional[re.Pattern] = None


def parse_atom(raw: str) -> Optional[Tuple[str, AtomKind, bool]]:
    """
    Split query syntax from the text of one atom.

    Args:
        raw: Atom text as typed, without surrounding whitespace

    Returns:
        Tuple of (text, kind, negate), or None if nothing is left to match
    """
    text = raw
    kind = AtomKind.FUZZY
    negate = False

    if text.startswith('!'):
        negate = True
        kind = AtomKind.SUBSTRING
        text = text[1:]

    if text.startswith('^'):
        kind = AtomKind.PREFIX
        text = text[1:]
    elif text.startswith("'"):
        kind = AtomKind.SUBSTRING
        text = text[1:]
    elif text.startswith('\\') and text[1:2] in ('^', "'", '!'):
        text = text[1:]

    if text.endswith('\\$'):
        text = text[:-2] + '$'
    elif text.endswith('$'):
        kind = AtomKind.EXACT if kind is AtomKind.PREFIX else AtomKind.POSTFIX
        text = text[:-1]

    if not text:
        return None
    return text, kind, negate


class FuzzyMatcher:
    """
    Reusable fuzzy matcher.

    Build one per process (or per service) and reuse it for every keystroke;
    the case and normalization rules are fixed at construction time. Each
    query is compiled once per call, then applied to every candidate.
    Positional bonuses are memoized per character pair, so they carry over
    from one keystroke to the next.
    """

    def __init__(self, config: Optional[RankingConfig] = None):
        """
        Initialize the matcher.

        Args:
            config: Ranking options; defaults to case-insensitive, normalized, prefix-biased
        """
        self.config = config or RankingConfig()
        self._ignore_case = self.config.ignore_case
        self._normalize_unicode = self.config.normalize_unicode
        self._prefer_prefix = self.config.prefer_prefix
        self._segment_bonus = BONUS_SEGMENT if self._prefer_prefix else BONUS_DELIMITER
        self._pair_bonus: Dict[str, int] = {}

    def normalize(self, text: str) -> Tuple[str, str]:
        """
        Prepare text for comparison.

        Returns:
            Tuple of (comparison text, case-preserving text of the same length)
        """
        if text.isascii():
            return (text.lower() if self._ignore_case else text), text

        if self._normalize_unicode:
            text = unicodedata.normalize('NFKC', text)
        if not self._ignore_case:
            return text, text

        folded = text.casefold()
        # Folding can change length (e.g. German sharp s); camel-case hints are dropped then.
        return folded, (text if len(folded) == len(text) else folded)

    def parse(self, query: str) -> List[Atom]:
        """
        Compile a query into atoms. Whitespace-only queries yield no atoms.
        """
        atoms = []
        for raw in query.split():
            parsed = parse_atom(raw)
            if parsed is None:
                continue
            text, kind, negate = parsed
            needle, _ = self.normalize(text)
            regex = None
            if kind is AtomKind.FUZZY:
                regex = self._subsequence_regex(needle)
            atoms.append(Atom(needle=needle, kind=kind, negate=negate, regex=regex))
        return atoms

    @staticmethod
    def _subsequence_regex(needle: str) -> re.Pattern:
        # a[^b]*b[^c]*c finds the leftmost, earliest-ending subsequence without backtracking blowup
        parts = [re.escape(needle[0])]
        for ch in needle[1:]:
            escaped = re.escape(ch)
            parts.append(f"[^{escaped}]*{escaped}")
        return re.compile(''.join(parts))

    def score(self, atoms: Sequence[Atom], candidate: str) -> Optional[int]:
        """
        Score a candidate against compiled atoms.

        Returns:
            Total score, or None if any atom fails to match
        """
        text, cased = self.normalize(candidate)
        total = 0
        for atom in atoms:
            if atom.negate:
                if self._contains(atom, text):
                    return None
                continue
            atom_score = self._score_atom(atom, text, cased)
            if atom_score is None:
                return None
            total += atom_score
        return total

    @staticmethod
    def _contains(atom: Atom, text: str) -> bool:
        needle = atom.needle
        if atom.kind is AtomKind.PREFIX:
            return text.startswith(needle)
        if atom.kind is AtomKind.POSTFIX:
            return text.endswith(needle)
        if atom.kind is AtomKind.EXACT:
            return text == needle
        return needle in text

    def _score_atom(self, atom: Atom, text: str, cased: str) -> Optional[int]:
        needle = atom.needle
        kind = atom.kind

        if kind is AtomKind.FUZZY:
            if len(needle) == 1:
                start = text.find(needle)
            else:
                found = atom.regex.search(text)
                start = -1 if found is None else found.start()
            return self._best_alignment(text, cased, needle, start, literal=False)

        if kind is AtomKind.SUBSTRING:
            return self._best_alignment(text, cased, needle, text.find(needle), literal=True)

        if kind is AtomKind.PREFIX:
            return self._align(text, cased, needle, 0) if text.startswith(needle) else None

        if kind is AtomKind.POSTFIX:
            if not text.endswith(needle):
                return None
            return self._align(text, cased, needle, len(text) - len(needle))

        return self._align(text, cased, needle, 0) if text == needle else None

    def _best_alignment(self, text: str, cased: str, needle: str,
                        start: int, literal: bool) -> Optional[int]:
        """
        Try every occurrence of the first needle character from ``start`` on.

        Fuzzy atoms align greedily forward from each start, so a later match
        that begins a path segment competes with the leftmost one. Literal
        atoms only start where the whole needle occurs.
        """
        first = needle[0] if not literal else needle
        best = None
        while start != -1:
            current = self._align(text, cased, needle, start)
            if current is None:
                # Later starts leave even less text for the rest of the needle
                break
            if best is None or current > best:
                best = current
            start = text.find(first, start + 1)
        return best

    def _align(self, text: str, cased: str, needle: str, start: int) -> Optional[int]:
        """
        Score needle matched from ``start``, taking the earliest position for
        each following character. Returns None if the rest does not fit.
        """
        pairs = self._pair_bonus
        bonus = pairs.get(cased[start - 1:start + 1]) if start else self._segment_bonus
        if bonus is None:
            bonus = self._learn_pair(cased[start - 1:start + 1])

        first_bonus = bonus
        score = SCORE_MATCH + bonus * BONUS_FIRST_CHAR_MULTIPLIER
        previous = start

        for ch in needle[1:]:
            position = text.find(ch, previous + 1)
            if position == -1:
                return None
            bonus = pairs.get(cased[position - 1:position + 1])
            if bonus is None:
                bonus = self._learn_pair(cased[position - 1:position + 1])

            if position == previous + 1:
                if bonus >= BONUS_DELIMITER and bonus > first_bonus:
                    first_bonus = bonus
                bonus = max(bonus, first_bonus, BONUS_CONSECUTIVE)
            else:
                score -= PENALTY_GAP_START + PENALTY_GAP_EXTENSION * (position - previous - 2)
                first_bonus = bonus

            score += SCORE_MATCH + bonus
            previous = position

        if self._prefer_prefix and start < PREFIX_BONUS:
            score += PREFIX_BONUS - start
        return score

    def _learn_pair(self, pair: str) -> int:
        """Compute and memoize the bonus for the second character of pair."""
        prev, current = pair
        if prev == '/':
            bonus = self._segment_bonus
        elif not prev.isalnum():
            bonus = BONUS_DELIMITER if current.isalnum() else 0
        elif prev.islower() and current.isupper():
            bonus = BONUS_CAMEL
        elif current.isdigit() and not prev.isdigit():
            bonus = BONUS_CAMEL
        else:
            bonus = 0

        if len(self._pair_bonus) < MAX_PAIR_CACHE:
            self._pair_bonus[pair] = bonus
        return bonus

    def _scored(self, query: str, candidates: Iterable[str]) -> List[Tuple[str, int]]:
        atoms = self.parse(query)
        if not atoms:
            return [(candidate, 0) for candidate in candidates]

        results = []
        for candidate in candidates:
            candidate_score = self.score(atoms, candidate)
            if candidate_score is not None:
                results.append((candidate, candidate_score))

        # list.sort is stable, also with reverse=True, so ties keep input order
        results.sort(key=itemgetter(1), reverse=True)
        return results

    def match(self, query: str, candidates: Iterable[str],
              limit: Optional[int] = None) -> List[MatchResult]:
        """
        Score and order candidates, keeping the scores.

        Args:
            query: Query text; empty matches every candidate with score 0
            candidates: Root-relative paths in traversal order
            limit: Maximum number of results to return

        Returns:
            MatchResult list, best first
        """
        scored = self._scored(query, candidates)
        if limit is not None:
            scored = scored[:limit]
        return [MatchResult(candidate=candidate, score=score) for candidate, score in scored]

    def rank(self, query: str, candidates: Iterable[str],
             limit: Optional[int] = None) -> List[str]:
        """
        Order candidates by match quality, dropping non-matches.

        Args:
            query: Query text; empty returns every candidate in input order
            candidates: Root-relative paths in traversal order
            limit: Maximum number of paths to return

        Returns:
            Matching paths, best first
        """
        scored = self._scored(query, candidates)
        if limit is not None:
            scored = scored[:limit]
        return [candidate for candidate, _ in scored]


_DEFAULT_MATCHER = FuzzyMatcher()


def rank(query: str, candidates: Iterable[str], limit: Optional[int] = None) -> List[str]:
    """Rank candidates with the process-wide default matcher."""
    return _DEFAULT_MATCHER.rank(query, candidates, limit=limit)
