"""
Data models for the Helpdesk BoW Analyzer.

Uses Pydantic for robust data validation and serialization.
Lexicons and analysis results are immutable so they can be shared
between threads without locking.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from .text_processing import join_terms, render_term_frequency


class LexiconEntry(BaseModel):
    """A single term -> category mapping inside a lexicon."""

    term: str = Field(..., description="Literal term (compared case-insensitively)")
    category: str = Field(..., description="Category the term points to")

    model_config = {"frozen": True}

    @field_validator("term", "category")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Trim surrounding whitespace."""
        return v.strip()


class Lexicon(BaseModel):
    """
    A curated word list mapping terms to a semantic category.

    Lookup is case-insensitive through a lower-cased key index built once
    on construction. When the same term appears more than once, the first
    entry in declaration order wins.

    Attributes:
        domain: Lexicon type tag (e.g. "emocional", "tecnico")
        entries: Ordered (term, category) entries
    """

    domain: str = Field(..., description="Lexicon type tag")
    entries: list[LexiconEntry] = Field(
        default_factory=list,
        description="Ordered term -> category entries"
    )

    model_config = {"frozen": True}

    _index: dict[str, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        index: dict[str, str] = {}
        for entry in self.entries:
            if not entry.term:
                continue
            index.setdefault(entry.term.lower(), entry.category)
        self._index = index

    @classmethod
    def from_pairs(cls, domain: str, pairs: list[tuple[str, str]]) -> "Lexicon":
        """Build a lexicon from (term, category) pairs."""
        return cls(
            domain=domain,
            entries=[LexiconEntry(term=term, category=category) for term, category in pairs],
        )

    def __len__(self) -> int:
        return len(self.entries)

    def is_empty(self) -> bool:
        """Check if the lexicon has no usable terms."""
        return not self._index

    def lookup(self, term: Optional[str]) -> Optional[str]:
        """Find the category for a term (case-insensitive), or None."""
        if not term:
            return None
        return self._index.get(term.lower())

    def terms(self) -> list[str]:
        """Get the distinct lower-cased terms in declaration order."""
        return list(self._index)

    def categories(self) -> list[str]:
        """Get the distinct categories in declaration order."""
        return list(dict.fromkeys(entry.category for entry in self.entries))


class LexiconSet(BaseModel):
    """The emotional and technical lexicon snapshots used for one analysis."""

    emotional: Optional[Lexicon] = None
    technical: Optional[Lexicon] = None

    model_config = {"frozen": True}

    def is_empty(self) -> bool:
        """Check if neither lexicon has any terms."""
        return all(lex is None or lex.is_empty() for lex in (self.emotional, self.technical))


class Ticket(BaseModel):
    """
    Represents a single helpdesk ticket.

    Attributes:
        id: Ticket identifier assigned by the ticket source
        subject: Short summary of the issue
        description: Free-text description analyzed by the classifier
        status: Workflow status (e.g. "Abierto")
        requester_email: Email of the user who opened the ticket
        department: Department the ticket is assigned to
        mood: Detected emotional tone (to be filled)
        technical_category: Suggested technical category (to be filled)
        term_frequency: Term counts from the last analysis (diagnostics)
    """

    id: str = Field(..., description="Ticket identifier")
    subject: str = Field(default="", description="Short summary")
    description: str = Field(default="", description="Free-text description")
    status: str = Field(default="", description="Workflow status")
    requester_email: str = Field(default="", description="Requester's email")
    department: str = Field(default="", description="Assigned department")
    mood: str = Field(default="", description="Detected mood")
    technical_category: str = Field(default="", description="Suggested technical category")
    term_frequency: dict[str, int] = Field(
        default_factory=dict,
        description="Term counts from the last analysis"
    )

    model_config = {"frozen": False}  # Allow modification for analysis

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Accept numeric identifiers from the ticket source."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator(
        "subject", "description", "status", "requester_email",
        "department", "mood", "technical_category",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Treat missing text fields as empty strings."""
        return "" if v is None else v

    def needs_analysis(self) -> bool:
        """Check if the ticket still needs mood/category analysis."""
        return not self.mood or not self.technical_category


class AnalysisResult(BaseModel):
    """Mood and technical category inferred for one description."""

    mood: str = Field(..., description="Predominant emotional tone")
    technical_category: str = Field(..., description="Suggested technical category")

    model_config = {"frozen": True}


class DetailedAnalysis(AnalysisResult):
    """
    Analysis result extended with diagnostic output.

    Includes the raw term-frequency table, the distinct detected terms and
    the subset of those terms present in either lexicon.
    """

    term_frequency: dict[str, int] = Field(default_factory=dict)
    detected_terms: list[str] = Field(default_factory=list)
    matched_terms: list[str] = Field(default_factory=list)

    @property
    def term_frequency_text(self) -> str:
        """Term-frequency table rendered as 'term:count, term:count'."""
        return render_term_frequency(self.term_frequency)

    @property
    def detected_terms_text(self) -> str:
        """Detected terms joined by ', '."""
        return join_terms(self.detected_terms)
