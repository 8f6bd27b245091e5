"""Read-only lexicon tables used by profile extraction and match scoring.

The tables ship as ``data/lexicon.yaml``. They are parsed once per path,
frozen into tuples and ``MappingProxyType`` views, and shared by every
caller in the process.
"""
from __future__ import annotations

import functools
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from jobmatch.errors import LexiconError
from jobmatch.log import get_logger

log = get_logger(__name__)

DEFAULT_LEXICON_PATH: Path = Path(__file__).resolve().parent / "data" / "lexicon.yaml"

_SENIORITY_TIERS = ("entry", "mid", "senior", "manager")


@dataclass(frozen=True)
class Lexicon:
    role_titles: tuple[str, ...]
    technical_skills: tuple[str, ...]
    seniority_indicators: Mapping[str, tuple[str, ...]]
    experience_categories: Mapping[str, tuple[str, ...]]
    role_synonyms: Mapping[str, tuple[str, ...]]
    role_families: Mapping[str, tuple[str, ...]]
    role_type_keywords: Mapping[str, tuple[str, ...]]
    experience_levels: Mapping[str, tuple[int, int]]
    content_reference_terms: tuple[str, ...]
    keyword_stopwords: frozenset[str]
    query_role_variations: Mapping[str, tuple[str, ...]]
    seniority_query_prefixes: Mapping[str, str]


def _terms(raw: Any, table: str) -> tuple[str, ...]:
    if not isinstance(raw, list) or not raw:
        raise LexiconError(f"Lexicon table {table!r} must be a non-empty list")
    return tuple(str(t).lower().strip() for t in raw)


def _groups(
    raw: Any, table: str, *, lower_keys: bool = True, lower_values: bool = True,
) -> Mapping[str, tuple[str, ...]]:
    if not isinstance(raw, dict) or not raw:
        raise LexiconError(f"Lexicon table {table!r} must be a non-empty mapping")
    out: dict[str, tuple[str, ...]] = {}
    for key, values in raw.items():
        if not isinstance(values, list):
            raise LexiconError(f"Lexicon table {table!r}: entry {key!r} must be a list")
        name = str(key).lower() if lower_keys else str(key)
        out[name] = tuple(
            str(v).lower().strip() if lower_values else str(v).strip() for v in values
        )
    return MappingProxyType(out)


def _levels(raw: Any) -> Mapping[str, tuple[int, int]]:
    if not isinstance(raw, dict) or not raw:
        raise LexiconError("Lexicon table 'experience_levels' must be a non-empty mapping")
    out: dict[str, tuple[int, int]] = {}
    for level, band in raw.items():
        if not isinstance(band, list) or len(band) != 2:
            raise LexiconError(f"Experience level {level!r} needs a [min, max] pair")
        lo, hi = int(band[0]), int(band[1])
        if lo > hi:
            raise LexiconError(f"Experience level {level!r} has min > max")
        out[str(level)] = (lo, hi)
    return MappingProxyType(out)


def _build(data: dict[str, Any]) -> Lexicon:
    try:
        indicators = _groups(data["seniority_indicators"], "seniority_indicators")
        if tuple(indicators) != _SENIORITY_TIERS:
            raise LexiconError(
                f"seniority_indicators must list tiers in order {_SENIORITY_TIERS}"
            )
        prefixes = data["seniority_query_prefixes"]
        if not isinstance(prefixes, dict):
            raise LexiconError("Lexicon table 'seniority_query_prefixes' must be a mapping")
        return Lexicon(
            role_titles=_terms(data["role_titles"], "role_titles"),
            technical_skills=_terms(data["technical_skills"], "technical_skills"),
            seniority_indicators=indicators,
            # category and role-type keys are display names, keep their case
            experience_categories=_groups(
                data["experience_categories"], "experience_categories", lower_keys=False,
            ),
            role_synonyms=_groups(data["role_synonyms"], "role_synonyms"),
            role_families=_groups(data["role_families"], "role_families"),
            role_type_keywords=_groups(
                data["role_type_keywords"], "role_type_keywords", lower_keys=False,
            ),
            experience_levels=_levels(data["experience_levels"]),
            content_reference_terms=_terms(data["content_reference_terms"], "content_reference_terms"),
            keyword_stopwords=frozenset(_terms(data["keyword_stopwords"], "keyword_stopwords")),
            query_role_variations=_groups(
                data["query_role_variations"], "query_role_variations",
                lower_keys=False, lower_values=False,
            ),
            seniority_query_prefixes=MappingProxyType(
                {str(k): str(v or "") for k, v in prefixes.items()}
            ),
        )
    except KeyError as exc:
        raise LexiconError(f"Lexicon is missing table {exc.args[0]!r}") from exc


@functools.lru_cache(maxsize=None)
def _load(path: str) -> Lexicon:
    p = Path(path)
    if not p.exists():
        raise LexiconError(f"Lexicon file not found: {p}")
    with open(p, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise LexiconError(f"Lexicon file {p} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise LexiconError(f"Lexicon file {p} must contain a mapping of tables")
    lexicon = _build(data)
    log.debug(
        "Loaded lexicon from %s (%d role titles, %d skills)",
        p.name, len(lexicon.role_titles), len(lexicon.technical_skills),
    )
    return lexicon


def load_lexicon(path: Path | str | None = None) -> Lexicon:
    """Return the lexicon at *path* (packaged tables by default), cached per path."""
    return _load(str(Path(path or DEFAULT_LEXICON_PATH).resolve()))
