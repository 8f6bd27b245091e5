"""Turn résumé text into a structured CandidateProfile.

Text extraction handles PDF (pdftotext or pypdf), DOCX (stdlib zipfile)
and TXT. Profile extraction is a single heuristic pass over the decoded
text: lexicon role phrases and title patterns, year spans per role line,
a per-category experience rollup, skills, education and keywords.
"""
from __future__ import annotations

import re
import shutil
import subprocess
import zipfile
from datetime import date
from pathlib import Path
from types import MappingProxyType
from xml.etree import ElementTree

from jobmatch.errors import ParseError
from jobmatch.lexicon import Lexicon, load_lexicon
from jobmatch.log import get_logger
from jobmatch.models import (
    ENTRY,
    MANAGER,
    MID,
    SENIOR,
    CandidateProfile,
    CategoryExperience,
    PrimaryRole,
    RoleRecord,
    Skills,
)

log = get_logger(__name__)

MAX_TOTAL_YEARS = 30
MAX_KEYWORDS = 50
YEARS_PER_UNDATED_ROLE = 2

# ── Text extraction ──────────────────────────────────────────────────────


def _read_txt(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="ignore")


# PDF text often comes out with words run together ("SeniorEngineer2019").
_RUN_TOGETHER_FIXES = (
    (re.compile(r"([a-z])([A-Z])"), r"\1 \2"),
    (re.compile(r"([a-zA-Z])(\d)"), r"\1 \2"),
    (re.compile(r"(\d)([a-zA-Z])"), r"\1 \2"),
    (re.compile(r"([.!?,;:])([A-Za-z])"), r"\1 \2"),
)
_MIN_SPACE_RATIO = 0.08


def _fix_spacing(text: str) -> str:
    if len(text) < 50 or text.count(" ") / len(text) > _MIN_SPACE_RATIO:
        return text
    log.debug("Page text looks run together, re-inserting spaces")
    for pattern, replacement in _RUN_TOGETHER_FIXES:
        text = pattern.sub(replacement, text)
    return text


def _extract_pdf(path: Path) -> str:
    # pdftotext -layout keeps one résumé line per text line; pypdf often doesn't
    if shutil.which("pdftotext"):
        result = subprocess.run(
            ["pdftotext", "-layout", str(path), "-"],
            capture_output=True, text=True, timeout=30,
        )
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout

    from pypdf import PdfReader

    return "\n".join(_fix_spacing(page.extract_text() or "") for page in PdfReader(str(path)).pages)


_W_NS = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"


def _extract_docx(path: Path) -> str:
    try:
        with zipfile.ZipFile(path) as zf, zf.open("word/document.xml") as f:
            body = ElementTree.parse(f)
    except (zipfile.BadZipFile, KeyError) as exc:
        raise ParseError(f"{path.name} is not a readable DOCX file") from exc
    paragraphs = ("".join(t.text or "" for t in p.iter(f"{_W_NS}t")) for p in body.iter(f"{_W_NS}p"))
    return "\n".join(p for p in paragraphs if p)


_EXTRACTORS = {".txt": _read_txt, ".docx": _extract_docx, ".pdf": _extract_pdf}
SUPPORTED_SUFFIXES = tuple(_EXTRACTORS)


def extract_text(path: Path) -> str:
    """Plain text of a .txt, .docx or .pdf résumé; ParseError for anything else."""
    extractor = _EXTRACTORS.get(path.suffix.lower())
    if extractor is None:
        raise ParseError(f"Unsupported resume format: {path.suffix or path.name}")
    return extractor(path)


# ── Roles and dates ──────────────────────────────────────────────────────

_YEAR_SPAN_RE = re.compile(
    r"(\d{4})\s*[-–]\s*(?:[A-Za-z]{3,9}\.?\s+)?(\d{4}|present|current)",
    re.IGNORECASE,
)

_TITLE_SUFFIX = (
    r"(?:Engineer|Developer|Designer|Manager|Analyst|Scientist"
    r"|Lead|Director|Specialist|Consultant)"
)
# "Title at Company", "Title | Company", "Title - Company"
_TITLE_AT_COMPANY_RE = re.compile(
    rf"([A-Z][A-Za-z ]*{_TITLE_SUFFIX})[ \t]+(?:at|@|\||-)[ \t]+([A-Za-z0-9][A-Za-z0-9 &.]*)"
)
# "Title" followed by the company on the next line (or after a comma)
_TITLE_THEN_COMPANY_RE = re.compile(
    rf"([A-Z][A-Za-z ]*{_TITLE_SUFFIX})[ \t]*\r?[\n,][ \t]*([A-Za-z0-9][A-Za-z0-9 &.]*)"
)


def capitalize_title(title: str) -> str:
    return " ".join(w[:1].upper() + w[1:].lower() for w in title.split(" "))


def parse_year_span(line: str, today: date | None = None) -> int | None:
    """Years covered by a ``YYYY - YYYY|Present|Current`` span, or None."""
    match = _YEAR_SPAN_RE.search(line)
    if not match:
        return None
    start = int(match.group(1))
    end_raw = match.group(2).lower()
    if end_raw in ("present", "current"):
        end = (today or date.today()).year
    else:
        end = int(end_raw)
    return max(0, end - start)


def _line_at(text: str, pos: int) -> str:
    start = text.rfind("\n", 0, pos) + 1
    end = text.find("\n", pos)
    return text[start:] if end == -1 else text[start:end]


def extract_roles(text: str, lexicon: Lexicon, today: date | None = None) -> list[RoleRecord]:
    """Roles in résumé order, de-duplicated by case-insensitive title."""
    roles: list[RoleRecord] = []
    seen: set[str] = set()

    def add(record: RoleRecord) -> None:
        key = record.title.lower()
        if key and key not in seen:
            seen.add(key)
            roles.append(record)

    for line in text.splitlines():
        low = line.lower().strip()
        if not low:
            continue
        for phrase in lexicon.role_titles:
            if phrase in low:
                add(RoleRecord(
                    title=capitalize_title(phrase),
                    years=parse_year_span(line, today),
                    raw_line=line.strip(),
                ))

    for pattern in (_TITLE_AT_COMPANY_RE, _TITLE_THEN_COMPANY_RE):
        for m in pattern.finditer(text):
            title = m.group(1).strip()
            company = m.group(2).strip()
            line = _line_at(text, m.start(1))
            add(RoleRecord(
                title=title,
                years=parse_year_span(line, today),
                company=company or None,
                raw_line=line.strip(),
            ))

    return roles


# ── Experience rollup ────────────────────────────────────────────────────


def categories_for_title(title: str, lexicon: Lexicon) -> list[str]:
    """Every experience category whose keywords appear in *title*."""
    low = title.lower()
    return [
        category
        for category, keywords in lexicon.experience_categories.items()
        if any(kw in low for kw in keywords)
    ]


def experience_by_category(
    roles: list[RoleRecord], lexicon: Lexicon,
) -> dict[str, CategoryExperience]:
    """Sum dated years per category; undated categories get 2 years per role."""
    years: dict[str, int] = {}
    titles: dict[str, list[str]] = {}
    for role in roles:
        for category in categories_for_title(role.title, lexicon):
            years.setdefault(category, 0)
            titles.setdefault(category, []).append(role.title)
            if role.years:
                years[category] += role.years

    rollup: dict[str, CategoryExperience] = {}
    for category, total in years.items():
        role_titles = tuple(titles[category])
        if total == 0 and role_titles:
            total = len(role_titles) * YEARS_PER_UNDATED_ROLE
        rollup[category] = CategoryExperience(years=total, roles=role_titles)
    return rollup


def total_experience(rollup: dict[str, CategoryExperience]) -> int:
    # Categories overlap, so the sum over-counts; the cap is a rough correction.
    return min(sum(entry.years for entry in rollup.values()), MAX_TOTAL_YEARS)


def determine_seniority(normalized_text: str, total_years: int, lexicon: Lexicon) -> str:
    for level, indicators in lexicon.seniority_indicators.items():
        if any(ind in normalized_text for ind in indicators):
            return level

    if total_years <= 2:
        return ENTRY
    if total_years <= 5:
        return MID
    if total_years <= 10:
        return SENIOR
    return MANAGER


def determine_primary_role(
    roles: list[RoleRecord], rollup: dict[str, CategoryExperience],
) -> PrimaryRole:
    """Dominant category by years, titled with the most recent role.

    The title is the first role listed even when it belongs to another
    category, so a recent move shows up as the candidate's current title.
    """
    if not roles:
        return PrimaryRole()

    primary_type = "General"
    max_years = 0
    for category, entry in rollup.items():
        if entry.years > max_years:
            max_years = entry.years
            primary_type = category

    return PrimaryRole(
        type=primary_type,
        title=roles[0].title or "Professional",
        years_in_role=max_years,
    )


# ── Skills, education, keywords ──────────────────────────────────────────

_DEGREE_RES = (
    re.compile(
        r"\b(?:bachelor'?s?|b\.?s\.?|b\.?a\.?)(?!\w).*?"
        r"(?:computer science|engineering|business|design|mathematics|physics)",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:master'?s?|m\.?s\.?|m\.?a\.?|mba)(?!\w).*?"
        r"(?:computer science|engineering|business|design|data science)",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:ph\.?d\.?|doctorate)(?!\w).*?(?:computer science|engineering)",
        re.IGNORECASE,
    ),
)

_CAPITALIZED_RUN_RE = re.compile(r"\b[A-Z][a-zA-Z]+(?:[ \t]+[A-Z][a-zA-Z]+)*\b")

_STRIP_TRAILING_PUNCT = " \t.,;:"


def extract_skills(normalized_text: str, lexicon: Lexicon) -> Skills:
    """Whole-word hits from the skill vocabulary, in vocabulary order."""
    found: list[str] = []
    for skill in lexicon.technical_skills:
        if re.search(rf"(?<!\w){re.escape(skill)}(?!\w)", normalized_text, re.IGNORECASE):
            found.append(capitalize_title(skill))
    return Skills(technical=tuple(dict.fromkeys(found)))


def extract_education(normalized_text: str) -> tuple[str, ...]:
    degrees: list[str] = []
    for pattern in _DEGREE_RES:
        degrees.extend(m.group(0).strip(_STRIP_TRAILING_PUNCT) for m in pattern.finditer(normalized_text))
    return tuple(dict.fromkeys(d for d in degrees if d))


def extract_keywords(text: str, lexicon: Lexicon) -> tuple[str, ...]:
    """Capitalized word runs (names, companies, tools), first 50 unique."""
    keywords = [
        word
        for word in _CAPITALIZED_RUN_RE.findall(text)
        if len(word) > 2 and word.lower() not in lexicon.keyword_stopwords
    ]
    return tuple(dict.fromkeys(keywords))[:MAX_KEYWORDS]


# ── Public API ───────────────────────────────────────────────────────────


def extract_profile(
    raw_text: str,
    *,
    lexicon: Lexicon | None = None,
    today: date | None = None,
) -> CandidateProfile:
    """Build a CandidateProfile from decoded résumé text.

    Missing sections never fail; they just leave the matching fields
    empty. Raises ParseError only when there is no text at all.
    """
    if raw_text is None or not raw_text.strip():
        raise ParseError("Resume text is empty")

    lexicon = lexicon or load_lexicon()
    normalized = raw_text.lower()

    roles = extract_roles(raw_text, lexicon, today)
    rollup = experience_by_category(roles, lexicon)
    total_years = total_experience(rollup)

    profile = CandidateProfile(
        roles=tuple(roles),
        experience_by_category=MappingProxyType(rollup),
        total_years_experience=total_years,
        skills=extract_skills(normalized, lexicon),
        seniority_level=determine_seniority(normalized, total_years, lexicon),
        education=extract_education(normalized),
        primary_role=determine_primary_role(roles, rollup),
        keywords=extract_keywords(raw_text, lexicon),
        raw_text=raw_text,
    )
    log.info(
        "Profile extracted: roles=%d, skills=%d, primary=%s (%s), total_years=%d, level=%s",
        len(profile.roles),
        len(profile.skills.technical),
        profile.primary_role.title,
        profile.primary_role.type,
        profile.total_years_experience,
        profile.seniority_level,
    )
    return profile


def parse_resume(path: Path, *, lexicon: Lexicon | None = None) -> CandidateProfile:
    """Extract text from a résumé file and build its profile."""
    log.info("Extracting text from %s", path.name)
    text = extract_text(path)
    if not text.strip():
        raise ParseError(f"Could not extract any text from {path.name}")
    return extract_profile(text, lexicon=lexicon)
