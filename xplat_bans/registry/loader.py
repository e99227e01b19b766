"""
Ban list loader for building the ban registry from JSON documents.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import requests

from ..exceptions import DefaultBanListError
from ..version import get_user_agent
from .models import SECTIONS, BanRegistry, LoadResult, LoadStatus

logger = logging.getLogger(__name__)

DEFAULT_BAN_FILE = Path(__file__).resolve().parent.parent / 'data' / 'xplat_bans.json'
DEFAULT_FETCH_TIMEOUT = 10.0

PathLike = Union[str, Path]


class BanRegistryLoader:
    """
    Accumulates ban list documents and builds an immutable ``BanRegistry``.

    Sources are merged in load order; on a key collision the later source
    wins. For the ``methods`` section the key is the declaring class, so a
    later source replaces that class's whole method mapping.
    """

    def __init__(self):
        self.classes: Dict[str, str] = {}
        self.packages: Dict[str, str] = {}
        self.methods: Dict[str, Dict[str, str]] = {}
        self.results: List[LoadResult] = []

    def load_document(self, document, source_label: str) -> LoadResult:
        """
        Merge an already parsed ban list document.

        Each of the ``classes``, ``packages`` and ``methods`` sections is
        optional. A missing or malformed section contributes nothing; a
        document that is not a mapping is rejected without touching data
        loaded earlier.

        Args:
            document: Parsed JSON document
            source_label: Name of the source, used in log messages

        Returns:
            LoadResult describing what was applied
        """
        if not isinstance(document, dict):
            error = f"expected a JSON object at the top level, got {type(document).__name__}"
            logger.warning(f"Ban list '{source_label}' is invalid: {error}")
            return self._record(LoadResult.failed(source_label, error))

        result = LoadResult(source=source_label, status=LoadStatus.LOADED)
        parsed: Dict[str, Dict] = {}

        for section in SECTIONS:
            if section not in document:
                logger.info(f"Missing \"{section}\" top level JSON name inside '{source_label}'.")
                result.missing_sections.append(section)
                continue

            if section == "methods":
                entries, problem = _parse_methods_section(document[section])
            else:
                entries, problem = _parse_flat_section(document[section])

            if problem:
                logger.warning(f"Ignoring \"{section}\" in '{source_label}': {problem}")
                result.malformed_sections.append(section)
                continue

            parsed[section] = entries

        # Sections are validated before anything is merged
        for section, entries in parsed.items():
            target = getattr(self, section)
            target.update(entries)
            result.loaded_sections.append(section)
            if section == "methods":
                result.entry_counts[section] = sum(len(names) for names in entries.values())
            else:
                result.entry_counts[section] = len(entries)

        if result.missing_sections or result.malformed_sections:
            result.status = LoadStatus.PARTIAL

        total = sum(result.entry_counts.values())
        logger.info(f"Loaded {total} ban entries from {source_label}")
        return self._record(result)

    def load_text(self, text: str, source_label: str) -> LoadResult:
        """Parse JSON text and merge it. Invalid JSON leaves the loader unchanged."""
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"JSON file '{source_label}' is invalid. Unable to parse: {e}")
            return self._record(LoadResult.failed(source_label, f"invalid JSON: {e}"))

        return self.load_document(document, source_label)

    def load_from_file(self, file_path: PathLike) -> LoadResult:
        """
        Load a ban list from a JSON file.

        Args:
            file_path: Path to the ban list file

        Returns:
            LoadResult; FAILED when the file is missing or unreadable
        """
        source_label = str(file_path)
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except FileNotFoundError:
            logger.warning(f"Ban list file not found: {source_label}")
            return self._record(LoadResult.failed(source_label, "file not found"))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Ban list file could not be read: {source_label}: {e}")
            return self._record(LoadResult.failed(source_label, f"unreadable: {e}"))

        return self.load_text(text, source_label)

    def load_from_url(self, url: str, timeout: float = DEFAULT_FETCH_TIMEOUT,
                      session: Optional[requests.Session] = None) -> LoadResult:
        """
        Fetch a ban list over HTTP(S) and merge it.

        Args:
            url: http:// or https:// location of the document
            timeout: Request timeout in seconds
            session: Optional requests session to reuse

        Returns:
            LoadResult; FAILED on network errors or non-2xx responses
        """
        http = session or requests.Session()
        try:
            logger.debug(f"Fetching ban list: {url}")
            response = http.get(url, timeout=timeout, headers={'User-Agent': get_user_agent()})
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Ban list could not be fetched from {url}: {e}")
            return self._record(LoadResult.failed(url, f"fetch failed: {e}"))

        return self.load_text(response.text, url)

    def load_source(self, source: PathLike, timeout: float = DEFAULT_FETCH_TIMEOUT) -> LoadResult:
        """Load from a URL or a filesystem path, whichever ``source`` names."""
        if is_url(str(source)):
            return self.load_from_url(str(source), timeout=timeout)
        return self.load_from_file(source)

    def build(self) -> BanRegistry:
        """Freeze everything loaded so far into a registry."""
        sources = [result.source for result in self.results if result.ok]
        return BanRegistry(self.classes, self.packages, self.methods, sources=sources)

    def _record(self, result: LoadResult) -> LoadResult:
        self.results.append(result)
        return result


def is_url(source: str) -> bool:
    return source.startswith(('http://', 'https://'))


def _parse_flat_section(value) -> Tuple[Dict[str, str], Optional[str]]:
    if not isinstance(value, dict):
        return {}, f"expected an object, got {type(value).__name__}"

    entries: Dict[str, str] = {}
    for key, reason in value.items():
        if not isinstance(reason, str):
            return {}, f"reason for '{key}' must be a string"
        if not key:
            logger.warning("Skipping ban entry with an empty name")
            continue
        entries[key] = reason
    return entries, None


def _parse_methods_section(value) -> Tuple[Dict[str, Dict[str, str]], Optional[str]]:
    if not isinstance(value, dict):
        return {}, f"expected an object, got {type(value).__name__}"

    entries: Dict[str, Dict[str, str]] = {}
    for owner, names in value.items():
        methods, problem = _parse_flat_section(names)
        if problem:
            return {}, f"methods of '{owner}': {problem}"
        entries[owner] = methods
    return entries, None


def build_registry(override: Optional[PathLike] = None,
                   default_path: Optional[PathLike] = None,
                   fetch_timeout: float = DEFAULT_FETCH_TIMEOUT) -> BanRegistry:
    """
    Build the registry used for an analysis run.

    The bundled default ban list is loaded first and must succeed. The
    optional override (a path or URL) is overlaid on top; if it cannot be
    loaded a warning is logged and the defaults are used alone.

    Args:
        override: Optional user-supplied ban list path or URL
        default_path: Replacement for the bundled default file
        fetch_timeout: Timeout for fetching a URL override

    Returns:
        Immutable BanRegistry

    Raises:
        DefaultBanListError: If the default ban list cannot be loaded
    """
    loader = BanRegistryLoader()
    default_source = default_path or DEFAULT_BAN_FILE

    result = loader.load_from_file(default_source)
    if not result.ok:
        logger.error(f"Default ban list {default_source} could not be loaded: {result.error}")
        raise DefaultBanListError(result.error, source=str(default_source))

    if override:
        result = loader.load_source(override, timeout=fetch_timeout)
        if not result.ok:
            logger.warning(f"Ban list {override} could not be loaded ({result.error}). "
                           "Custom bans will not be in effect.")

    registry = loader.build()
    logger.debug(f"Built {registry!r} from {len(registry.sources)} source(s)")
    return registry
