"""
Lexicon-based Bag-of-Words classifier for the Helpdesk BoW Analyzer.

Scores a ticket description against two hand-maintained lexicons:
- Emotional lexicon -> predominant mood
- Technical lexicon -> suggested technical category

The classifier is pure and deterministic. Missing text, missing lexicons
and unknown terms all degrade to the default labels instead of raising.
"""

import logging
from typing import Mapping, Optional

from .models import (
    AnalysisResult,
    DetailedAnalysis,
    Lexicon,
    LexiconSet,
    Ticket,
)
from .text_processing import build_term_frequency


logger = logging.getLogger(__name__)


DEFAULT_MOOD = "Neutralidad"
DEFAULT_TECHNICAL_CATEGORY = "General"


def classify(
    tf: Optional[Mapping[str, int]],
    lexicon: Optional[Lexicon],
    default_label: str,
) -> str:
    """
    Pick the best-scoring lexicon category for a term-frequency table.

    Each term found in the lexicon adds its count to its category's score.
    The category with the strictly greatest score wins; on equal scores the
    category encountered first keeps the lead.

    Args:
        tf: Term -> count mapping for one text.
        lexicon: Lexicon to score against (None behaves as empty).
        default_label: Label returned when nothing matches.

    Returns:
        Winning category, or default_label.
    """
    if not tf or lexicon is None or lexicon.is_empty():
        return default_label

    scores: dict[str, int] = {}
    for term, count in tf.items():
        category = lexicon.lookup(term)
        if category is not None:
            scores[category] = scores.get(category, 0) + count

    best_label = default_label
    best_score = 0
    for category, score in scores.items():
        if score > best_score:
            best_score = score
            best_label = category

    logger.debug(f"Lexicon '{lexicon.domain}' scores: {scores} -> {best_label}")
    return best_label


class BowClassifier:
    """
    Bag-of-Words classifier for helpdesk tickets.

    Holds read-only lexicon snapshots, so one instance can be shared
    between threads.
    """

    def __init__(
        self,
        lexicons: LexiconSet,
        default_mood: str = DEFAULT_MOOD,
        default_technical_category: str = DEFAULT_TECHNICAL_CATEGORY,
    ):
        """
        Initialize the classifier.

        Args:
            lexicons: Emotional and technical lexicons.
            default_mood: Mood returned when no emotional term matches.
            default_technical_category: Category returned when no technical
                term matches.
        """
        self._lexicons = lexicons
        self._default_mood = default_mood
        self._default_category = default_technical_category

        if lexicons.emotional is None:
            logger.warning(f"No emotional lexicon loaded, mood will default to '{default_mood}'")
        if lexicons.technical is None:
            logger.warning(
                f"No technical lexicon loaded, category will default to "
                f"'{default_technical_category}'"
            )

        logger.debug(
            f"Initialized classifier: emotional={self._lexicon_size(lexicons.emotional)} terms, "
            f"technical={self._lexicon_size(lexicons.technical)} terms"
        )

    @staticmethod
    def _lexicon_size(lexicon: Optional[Lexicon]) -> int:
        return len(lexicon) if lexicon is not None else 0

    @property
    def lexicons(self) -> LexiconSet:
        return self._lexicons

    def detect_mood(self, description: Optional[str]) -> str:
        """Detect the predominant mood of a description."""
        if not description or not description.strip():
            return self._default_mood
        tf = build_term_frequency(description)
        return classify(tf, self._lexicons.emotional, self._default_mood)

    def suggest_technical_category(self, description: Optional[str]) -> str:
        """Suggest the technical category of a description."""
        if not description or not description.strip():
            return self._default_category
        tf = build_term_frequency(description)
        return classify(tf, self._lexicons.technical, self._default_category)

    def analyze(self, description: Optional[str]) -> AnalysisResult:
        """
        Analyze a description for mood and technical category.

        Args:
            description: Ticket description (may be None).

        Returns:
            AnalysisResult with both labels.
        """
        tf = build_term_frequency(description)
        return AnalysisResult(
            mood=classify(tf, self._lexicons.emotional, self._default_mood),
            technical_category=classify(tf, self._lexicons.technical, self._default_category),
        )

    def analyze_detailed(self, description: Optional[str]) -> DetailedAnalysis:
        """
        Analyze a description and include diagnostic output.

        Args:
            description: Ticket description (may be None).

        Returns:
            DetailedAnalysis with labels, term frequencies, detected terms
            and the terms that matched either lexicon.
        """
        tf = build_term_frequency(description)

        matched = [
            term for term in tf
            if any(
                lex is not None and lex.lookup(term) is not None
                for lex in (self._lexicons.emotional, self._lexicons.technical)
            )
        ]

        return DetailedAnalysis(
            mood=classify(tf, self._lexicons.emotional, self._default_mood),
            technical_category=classify(tf, self._lexicons.technical, self._default_category),
            term_frequency=tf,
            detected_terms=list(tf),
            matched_terms=matched,
        )

    def analyze_and_update(self, ticket: Ticket) -> Ticket:
        """
        Analyze a ticket and fill its mood, technical category and
        term-frequency table.

        Args:
            ticket: The ticket to analyze.

        Returns:
            The same ticket with analysis fields filled.
        """
        result = self.analyze_detailed(ticket.description)

        ticket.mood = result.mood
        ticket.technical_category = result.technical_category
        ticket.term_frequency = result.term_frequency

        logger.debug(
            f"Analyzed {ticket.id}: mood={result.mood}, "
            f"category={result.technical_category}"
        )
        return ticket

    def analyze_batch(
        self,
        tickets: list[Ticket],
        batch_size: int = 10,
        force: bool = False,
    ) -> list[Ticket]:
        """
        Analyze multiple tickets with progress logging.

        Args:
            tickets: Tickets to analyze.
            batch_size: Number of tickets to process before logging progress.
            force: Re-analyze tickets that already carry both labels.

        Returns:
            List of analyzed tickets.
        """
        total = len(tickets)
        analyzed = []
        skipped = 0

        logger.info(f"Starting analysis of {total} tickets")

        for i, ticket in enumerate(tickets, 1):
            if force or ticket.needs_analysis():
                analyzed.append(self.analyze_and_update(ticket))
            else:
                skipped += 1
                analyzed.append(ticket)

            if i % batch_size == 0 or i == total:
                logger.info(f"Progress: {i}/{total} tickets analyzed")

        if skipped:
            logger.info(f"Kept existing labels for {skipped} already analyzed tickets")
        logger.info(f"Analysis complete: {len(analyzed)} tickets processed")
        return analyzed
