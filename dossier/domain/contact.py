"""Header/contact extraction and the contact line list shown by templates."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from ..core.config import DEFAULT_CONFIG, HeuristicsConfig
from .headings import classify_heading
from .models import Basics, ContactLine

EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
PHONE_RE = re.compile(r"(\+?\d[\d\s().-]{7,}\d)")
URL_TOKEN_RE = re.compile(
    r"(https?://\S+)|(www\.\S+)|(\b(?:linkedin|github|gitlab)\.[a-z]{2,}\S*\b)|(\b[a-z0-9-]+\.[a-z]{2,}\b)",
    re.IGNORECASE,
)

_PROFILE_HOST_RE = re.compile(r"(linkedin|github|gitlab)\.", re.IGNORECASE)
_LOCATION_RE = re.compile(r"^[A-Za-z][A-Za-z .'-]+,\s*[A-Za-z][A-Za-z .'-]+$")
_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z .'-]+$")
_HEADLINE_RE = re.compile(r"^[A-Za-z][A-Za-z &/.'-]+$")

MIN_PHONE_DIGITS = 9


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------


def digits_count(value: str) -> int:
    return len(re.sub(r"\D", "", value or ""))


def normalize_phone_display(value: str) -> str:
    value = re.sub(r"[^\d+().\s-]", "", (value or "").strip())
    return re.sub(r"\s+", " ", value).strip()


def normalize_url(value: str) -> str:
    """Give bare ``www.``/profile/domain tokens an ``https://`` scheme."""
    v = re.sub(r"[),.;|]+$", "", (value or "").strip())
    if v.lower().startswith(("http://", "https://")):
        return v
    if v.lower().startswith("www.") or re.match(r"^[a-z0-9-]+(\.[a-z0-9-]+)*\.[a-z]{2,}(/\S*)?$", v, re.IGNORECASE):
        return f"https://{v}"
    return v


def url_host(value: str) -> str:
    stripped = re.sub(r"^https?://", "", (value or "").strip(), flags=re.IGNORECASE)
    return stripped.split("/")[0].lower()


def normalize_url_display(value: str) -> str:
    """Display form of a URL: the host only, without scheme or ``www.``."""
    raw = re.sub(r"^https?://", "", (value or "").strip(), flags=re.IGNORECASE)
    raw = re.sub(r"^www\.", "", raw, flags=re.IGNORECASE)
    raw = re.sub(r"[),.;]+$", "", raw).rstrip("/")
    return raw.split("/")[0] or raw


def _email_domain(email: str) -> str:
    return email.split("@", 1)[1].lower() if "@" in (email or "") else ""


def is_spurious_url(url: str, email: str = "", denylist: Optional[Iterable[str]] = None) -> bool:
    """True when *url* is really a mail provider or the user's own mail domain."""
    host = url_host(url)
    if host.startswith("www."):
        host = host[4:]
    if not host:
        return True
    blocked = set(DEFAULT_CONFIG.email_provider_denylist if denylist is None else denylist)
    return host in blocked or host == _email_domain(email)


def is_contact_text(value: str) -> bool:
    return bool(EMAIL_RE.search(value) or PHONE_RE.search(value) or URL_TOKEN_RE.search(value))


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_email(text: str) -> str:
    match = EMAIL_RE.search(text or "")
    return match.group(0) if match else ""


def extract_phone(text: str) -> str:
    match = PHONE_RE.search(text or "")
    if not match or digits_count(match.group(0)) < MIN_PHONE_DIGITS:
        return ""
    return normalize_phone_display(match.group(0))


def pick_best_url(text: str, email: str = "", config: HeuristicsConfig = DEFAULT_CONFIG) -> str:
    """Personal site > LinkedIn > GitHub > first candidate."""
    candidates = []
    # "jane.doe@acme.io" must not yield "jane.doe" as a site
    without_emails = EMAIL_RE.sub(" ", text or "")
    for match in URL_TOKEN_RE.finditer(without_emails):
        url = normalize_url(match.group(0))
        if url and not is_spurious_url(url, email, config.email_provider_denylist):
            candidates.append(url)
    if not candidates:
        return ""

    for test in (
        lambda u: not _PROFILE_HOST_RE.search(u),
        lambda u: "linkedin." in u.lower(),
        lambda u: "github." in u.lower(),
    ):
        for url in candidates:
            if test(url):
                return url
    return candidates[0]


def extract_location(parts: Iterable[str]) -> str:
    for part in parts:
        if is_contact_text(part):
            continue
        if len(part) < 5 or len(part) > 44:
            continue
        if _LOCATION_RE.match(part):
            return part
    return ""


def extract_name(lines: List[str], config: HeuristicsConfig = DEFAULT_CONFIG) -> str:
    for line in lines[: config.name_scan_lines]:
        if is_contact_text(line) or len(line) > 50:
            continue
        if classify_heading(line):
            continue
        if _NAME_RE.match(line):
            return line
    return ""


def extract_headline(lines: List[str], name: str) -> str:
    if not name or name not in lines:
        return ""
    start = lines.index(name) + 1
    for line in lines[start : start + 3]:
        if is_contact_text(line) or classify_heading(line):
            continue
        if len(line) < 4 or len(line) > 60:
            continue
        if _HEADLINE_RE.match(line):
            return line
    return ""


def extract_basics(lines: List[str], config: HeuristicsConfig = DEFAULT_CONFIG) -> Basics:
    """Pull contact fields out of the header region of normalized *lines*.

    Only the first lines are scanned so that URLs and numbers deep in the
    body text are not mistaken for contact data.
    """
    basics = Basics()
    header_text = " ".join(lines[: config.header_scan_lines])

    basics.email = extract_email(header_text)
    basics.phone = extract_phone(header_text)
    basics.url = pick_best_url(header_text, basics.email, config)

    # DOCX exports often put all contact data on one pipe-separated line.
    parts = [part.strip() for line in lines[: config.location_scan_lines] for part in line.split("|")]
    basics.location = extract_location(part for part in parts if part)

    basics.name = extract_name(lines, config)
    basics.headline = extract_headline(lines, basics.name)
    return basics


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------


def contact_lines(basics: Basics, denylist: Optional[Iterable[str]] = None) -> List[ContactLine]:
    """Ordered contact lines for templates: location, email, phone, url.

    URL lines pointing at a mail provider or the user's own mail domain are
    dropped, and repeated ``(kind, value)`` pairs are collapsed.
    """
    lines: List[ContactLine] = []
    if basics.location:
        lines.append(ContactLine("location", basics.location.strip()))
    if basics.email:
        lines.append(ContactLine("email", basics.email.strip()))
    if basics.phone:
        phone = normalize_phone_display(basics.phone)
        if phone:
            lines.append(ContactLine("phone", phone))
    if basics.url and not is_spurious_url(basics.url, basics.email, denylist):
        display = normalize_url_display(basics.url)
        if display:
            lines.append(ContactLine("url", display))

    seen: set[str] = set()
    unique: List[ContactLine] = []
    for line in lines:
        key = f"{line.kind}:{line.value.strip().lower()}"
        if key in seen:
            continue
        seen.add(key)
        unique.append(line)
    return unique


def contact_inline(basics: Basics, separator: str = " • ", denylist: Optional[Iterable[str]] = None) -> str:
    return separator.join(line.value for line in contact_lines(basics, denylist) if line.value)
