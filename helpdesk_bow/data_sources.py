"""
Data source handlers for the Helpdesk BoW Analyzer.

Responsible for retrieving the data the analysis consumes:
- Emotional and technical lexicons from a YAML/JSON file or HTTP endpoint
- Helpdesk tickets from a YAML/JSON file
"""

import logging
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import LexiconConfig
from .models import Lexicon, LexiconEntry, LexiconSet, Ticket
from .text_processing import strip_accents


logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """Base exception for data source errors."""
    pass


class LexiconSourceError(DataSourceError):
    """Error when retrieving or parsing lexicons."""
    pass


class TicketSourceError(DataSourceError):
    """Error when reading tickets."""
    pass


EMOTIONAL_TAGS = frozenset({"emocional", "emotional"})
TECHNICAL_TAGS = frozenset({"tecnico", "technical"})

_LEXICON_LIST_KEYS = ("lexicons", "dictionaries", "diccionarios")
_LEXICON_TYPE_KEYS = ("type", "tipo", "domain")
_LEXICON_WORDS_KEYS = ("words", "palabras", "entries", "terms")
_TERM_KEYS = ("term", "texto", "word")
_CATEGORY_KEYS = ("category", "categoria")


def _tag_key(tag: Any) -> str:
    """Compare lexicon type tags ignoring case and accents."""
    return strip_accents(str(tag).strip().lower())


def _first_present(data: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _is_text_scalar(value: Any) -> bool:
    """Check a lexicon value is a string or an integer (e.g. an error code)."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, int))


class LexiconHTTPClient:
    """
    Client for lexicons served over HTTP.

    Fetches the raw YAML/JSON lexicon document, retrying transient
    transport errors.
    """

    def __init__(self, config: LexiconConfig):
        """
        Initialize the lexicon client.

        Args:
            config: Lexicon configuration with source URL and timeouts.
        """
        self._config = config
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "LexiconHTTPClient":
        """Context manager entry."""
        self._client = httpx.Client(timeout=self._config.request_timeout)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        if self._client:
            self._client.close()
            self._client = None

    def fetch_document(self) -> str:
        """
        Fetch the raw lexicon document.

        Returns:
            Response body as text.

        Raises:
            LexiconSourceError: If the request fails after retries.
        """
        if not self._client:
            raise RuntimeError("Client must be used within a context manager")

        logger.info(f"Fetching lexicons from {self._config.source}")

        retrying = Retrying(
            stop=stop_after_attempt(self._config.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=lambda retry_state: logger.warning(
                f"Retrying lexicon fetch after error: {retry_state.outcome.exception()}"
            ),
            reraise=True,
        )

        try:
            for attempt in retrying:
                with attempt:
                    response = self._client.get(self._config.source)
                    response.raise_for_status()

            logger.debug(f"Raw lexicon content length: {len(response.text)}")
            return response.text

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching lexicons: {e}")
            raise LexiconSourceError(f"HTTP error: {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error fetching lexicons: {e}")
            raise LexiconSourceError(f"Request failed: {str(e)}") from e


def read_lexicon_document(config: LexiconConfig) -> str:
    """
    Read the raw lexicon document from a file or URL.

    Args:
        config: Lexicon configuration.

    Returns:
        Raw document text.

    Raises:
        LexiconSourceError: If the source cannot be read.
    """
    if config.is_remote:
        with LexiconHTTPClient(config) as client:
            return client.fetch_document()

    path = Path(config.source)
    logger.info(f"Reading lexicons from {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read lexicon file {path}: {e}")
        raise LexiconSourceError(f"Cannot read lexicon file {path}: {e}") from e


def _parse_entries(raw: Any, domain: str) -> list[LexiconEntry]:
    """
    Parse lexicon entries, skipping malformed ones with a warning.

    Accepts a {term: category} mapping, or a list whose items are
    {"term": ..., "category": ...} mappings or [term, category] pairs.
    """
    if isinstance(raw, dict):
        raw = [{"term": term, "category": category} for term, category in raw.items()]

    if not isinstance(raw, list):
        logger.warning(f"Lexicon '{domain}' has no entry list, treating as empty")
        return []

    entries: list[LexiconEntry] = []
    seen_terms: set[str] = set()

    for idx, item in enumerate(raw):
        if isinstance(item, dict):
            term = _first_present(item, _TERM_KEYS)
            category = _first_present(item, _CATEGORY_KEYS)
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            term, category = item
        else:
            logger.warning(f"Skipping malformed entry {idx} in lexicon '{domain}': {item!r}")
            continue

        if term is None or category is None or not str(term).strip():
            logger.warning(f"Skipping incomplete entry {idx} in lexicon '{domain}': {item!r}")
            continue

        # Unquoted YAML scalars like on/off/yes load as booleans
        if not _is_text_scalar(term) or not _is_text_scalar(category):
            logger.warning(
                f"Skipping entry {idx} in lexicon '{domain}': term and category "
                f"must be strings (quote them in YAML): {item!r}"
            )
            continue

        entry = LexiconEntry(term=str(term), category=str(category))
        key = entry.term.lower()
        if key in seen_terms:
            logger.warning(
                f"Duplicate term '{entry.term}' in lexicon '{domain}', first entry wins"
            )
        seen_terms.add(key)
        entries.append(entry)

    return entries


def _collect_raw_lexicons(data: Any) -> list[tuple[str, Any]]:
    """Extract (type tag, raw entries) pairs from the supported layouts."""
    lexicon_list = None

    if isinstance(data, list):
        lexicon_list = data
    elif isinstance(data, dict):
        lexicon_list = _first_present(data, _LEXICON_LIST_KEYS)
        if lexicon_list is None:
            # Mapping layout: {tag: entries}
            return [(str(tag), entries) for tag, entries in data.items()]

    if not isinstance(lexicon_list, list):
        return []

    collected = []
    for idx, item in enumerate(lexicon_list):
        if not isinstance(item, dict):
            logger.warning(f"Skipping malformed lexicon at index {idx}")
            continue
        tag = _first_present(item, _LEXICON_TYPE_KEYS)
        if tag is None:
            logger.warning(f"Lexicon at index {idx} has no type, skipping")
            continue
        collected.append((str(tag), _first_present(item, _LEXICON_WORDS_KEYS)))
    return collected


def parse_lexicons(
    content: str,
    emotional_tag: str = "emocional",
    technical_tag: str = "tecnico",
) -> LexiconSet:
    """
    Parse a YAML/JSON lexicon document into a LexiconSet.

    Implements graceful handling of:
    - Several document layouts (list, "lexicons" key, tag mapping)
    - Malformed entries (skipped with a warning)
    - Missing lexicons (left as None, the classifier falls back to defaults)

    Args:
        content: Raw document text.
        emotional_tag: Type tag of the emotional lexicon.
        technical_tag: Type tag of the technical lexicon.

    Returns:
        Parsed LexiconSet.

    Raises:
        LexiconSourceError: If the document is not valid YAML/JSON.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error: {e}")
        raise LexiconSourceError(f"Invalid YAML: {str(e)}") from e

    if not data:
        logger.warning("Empty lexicon document received, using empty lexicons")
        return LexiconSet()

    emotional_keys = EMOTIONAL_TAGS | {_tag_key(emotional_tag)}
    technical_keys = TECHNICAL_TAGS | {_tag_key(technical_tag)}

    emotional: Optional[Lexicon] = None
    technical: Optional[Lexicon] = None

    for tag, raw_entries in _collect_raw_lexicons(data):
        key = _tag_key(tag)
        if key in emotional_keys:
            if emotional is not None:
                logger.warning(f"Duplicate emotional lexicon '{tag}' ignored")
                continue
            emotional = Lexicon(domain=tag, entries=_parse_entries(raw_entries, tag))
        elif key in technical_keys:
            if technical is not None:
                logger.warning(f"Duplicate technical lexicon '{tag}' ignored")
                continue
            technical = Lexicon(domain=tag, entries=_parse_entries(raw_entries, tag))
        else:
            logger.debug(f"Ignoring lexicon with unknown type '{tag}'")

    logger.info(
        f"Parsed lexicons: emotional={len(emotional) if emotional else 0} terms, "
        f"technical={len(technical) if technical else 0} terms"
    )
    return LexiconSet(emotional=emotional, technical=technical)


def load_lexicons(config: LexiconConfig) -> LexiconSet:
    """
    Load the emotional and technical lexicons from the configured source.

    Args:
        config: Lexicon configuration.

    Returns:
        LexiconSet snapshot.

    Raises:
        LexiconSourceError: If reading or parsing fails.
    """
    content = read_lexicon_document(config)
    return parse_lexicons(content, config.emotional_tag, config.technical_tag)


def load_tickets(path: Path) -> list[Ticket]:
    """
    Load tickets from a YAML/JSON file.

    The document may be a list of tickets or a mapping with a "tickets"
    key. Tickets without an id get a positional one; malformed entries are
    skipped with a warning.

    Args:
        path: Path to the tickets file.

    Returns:
        List of Ticket objects.

    Raises:
        TicketSourceError: If the file cannot be read or parsed.
    """
    logger.info(f"Reading tickets from {path}")

    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        logger.error(f"Cannot read tickets file {path}: {e}")
        raise TicketSourceError(f"Cannot read tickets file {path}: {e}") from e
    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in tickets file: {e}")
        raise TicketSourceError(f"Invalid YAML: {str(e)}") from e

    if isinstance(data, dict):
        data = data.get("tickets", [])

    if not data:
        logger.warning("No tickets found in file")
        return []

    if not isinstance(data, list):
        raise TicketSourceError("Tickets file must contain a list of tickets")

    tickets = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning(f"Skipping malformed ticket at index {idx}")
            continue

        fields = dict(item)
        if fields.get("id") is None or str(fields["id"]).strip() == "":
            fields["id"] = f"T-{idx + 1}"
            logger.warning(f"Ticket at index {idx} has no id, assigned: '{fields['id']}'")

        try:
            tickets.append(Ticket(**fields))
        except (ValueError, TypeError) as e:
            logger.warning(f"Skipping malformed ticket at index {idx}: {e}")
            continue

    logger.info(f"Loaded {len(tickets)} tickets")
    return tickets
