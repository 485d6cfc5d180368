# council/utils/parser.py
"""
Frontmatter Parser - recovers (metadata, body) from free-form model output.

FORMAT (what we ask the models for):
---
persona_id: feynman
thesis: "..."
risks:
  - "..."
sources:
  - title: "..."
    url: https://...
---
# Markdown body

WHAT MODELS ACTUALLY SEND:
- the whole document wrapped in ```markdown fences
- a sentence of preamble before the opening ---
- unquoted **bold** list items (YAML alias syntax)
- unquoted colons inside titles, list items and scalar values

CASCADE:
1. unwrap fences, strip preamble, split on the --- delimiters
2. run STRATEGIES in order, first non-None result wins:
   a. decode_sanitized  - quote the risky patterns, yaml.safe_load
   b. regex_fallback    - pull only the fields the pipeline needs from the
                          raw block; succeeds only if the profile's minimum
                          fields are present

parse_frontmatter() never raises. None means "this output is unusable".
"""

import re
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

from council.core.exceptions import ParseError
from council.core.logging import log


# Preamble before an embedded "\n---\n" is only stripped when the
# delimiter starts within this many characters.
PREAMBLE_LIMIT = 500

CODE_FENCE_PATTERN = re.compile(r"^```(?:markdown|md)?[ \t]*\r?\n(.*?)```\s*$", re.DOTALL | re.IGNORECASE)

FRONTMATTER_PATTERN = re.compile(r"^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n(.*))?$", re.DOTALL)

# Looser form: "---key: value ... ---body" (no newline after the delimiters)
LOOSE_FRONTMATTER_PATTERN = re.compile(r"^---\s*(.*?)---\s*(.*)$", re.DOTALL)


# ═══════════════════════════════════════════════════════════════════════════════
# RESULT TYPES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ParsedDocument:
    """Decoded frontmatter plus the remaining markdown body."""
    metadata: Dict[str, Any]
    body: str
    strategy: str = ""


@dataclass(frozen=True)
class FallbackProfile:
    """
    Which fields the regex fallback recovers, and which it requires.

    required names metadata keys that must be present for the fallback
    result to count; require_body additionally demands a non-empty body.
    """
    name: str
    string_fields: Tuple[str, ...] = ()
    array_fields: Tuple[str, ...] = ()
    required: Tuple[str, ...] = ()
    require_body: bool = False
    extract_sources: bool = True
    extract_scores: bool = False


IDEA_PROFILE = FallbackProfile(
    name="idea",
    string_fields=("persona_id", "persona", "thesis"),
    array_fields=("risks", "anti_plan", "falsifiers"),
    required=("persona_id", "thesis"),
)

JUDGE_PROFILE = FallbackProfile(
    name="judge",
    string_fields=("winner",),
    array_fields=("next_actions",),
    required=("scores",),
    require_body=True,
    extract_scores=True,
)


# ═══════════════════════════════════════════════════════════════════════════════
# PRE-PROCESSING
# ═══════════════════════════════════════════════════════════════════════════════

def unwrap_code_fence(text: str) -> str:
    """Strip a ```markdown / ```md fence wrapping the entire input."""
    match = CODE_FENCE_PATTERN.match(text)
    if match:
        return match.group(1)
    return text


def strip_preamble(text: str) -> str:
    """
    Drop stray text before the opening delimiter.

    Only a delimiter starting within PREAMBLE_LIMIT characters counts;
    anything further in is body text, not a metadata block.
    """
    if text.startswith("---"):
        return text

    embedded = text.find("\n---\n")
    if embedded != -1 and embedded < PREAMBLE_LIMIT:
        return text[embedded + 1:]

    bare = text.find("---")
    if 0 < bare < PREAMBLE_LIMIT:
        return text[bare:]

    return text


def split_frontmatter(text: str) -> Optional[Tuple[str, str]]:
    """Return (metadata block, body) or None if no delimiter pair exists."""
    match = FRONTMATTER_PATTERN.match(text)
    if match:
        return match.group(1), (match.group(2) or "").strip()

    loose = LOOSE_FRONTMATTER_PATTERN.match(text)
    if loose:
        return loose.group(1).strip(), loose.group(2).strip()

    return None


# ═══════════════════════════════════════════════════════════════════════════════
# SANITIZER
# ═══════════════════════════════════════════════════════════════════════════════

def _quote(content: str) -> str:
    escaped = content.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


_BOLD_ITEM = re.compile(r"^([ \t]*-[ \t]+)(\*\*.+)$", re.MULTILINE)
_TITLE_FIELD = re.compile(r"^([ \t]*(?:-[ \t]+)?title:[ \t]*)([^\"'\s].*)$", re.MULTILINE)
_URL_FIELD = re.compile(r"^([ \t]*(?:-[ \t]+)?url:[ \t]*)([^\"'\s].*)$", re.MULTILINE)
_COLON_ITEM = re.compile(r"^([ \t]*-[ \t]+)([^\"'\-\s][^:\n]*:[ \t]*[^\n]+)$", re.MULTILINE)
_YAML_KEY = re.compile(r"^[a-z_]+:\s")
_RISKY_SCALAR = re.compile(r"^([ \t]*[a-z_]+:[ \t]+)(\*[^\n]*|[^\"'\s\[{|>&!#][^\n]*?:[ \t][^\n]*)$", re.MULTILINE)


def sanitize_yaml(block: str) -> str:
    """
    Quote the patterns models routinely emit that YAML rejects.

    - list items starting with ** (alias syntax otherwise)
    - every unquoted title value (titles carry colons)
    - url values with a colon that are not http(s) URLs
    - list items shaped like "Title: description" (but not "key: value")
    - scalar values starting with * or containing ": "
    """
    def bold_item(m: re.Match) -> str:
        return m.group(1) + _quote(m.group(2).rstrip())

    def title_field(m: re.Match) -> str:
        return m.group(1) + _quote(m.group(2).rstrip())

    def url_field(m: re.Match) -> str:
        content = m.group(2).rstrip()
        if ":" in content and not content.startswith("http"):
            return m.group(1) + _quote(content)
        return m.group(1) + content

    def colon_item(m: re.Match) -> str:
        content = m.group(2).rstrip()
        if _YAML_KEY.match(content):
            return m.group(1) + content
        return m.group(1) + _quote(content)

    def risky_scalar(m: re.Match) -> str:
        return m.group(1) + _quote(m.group(2).rstrip())

    block = _BOLD_ITEM.sub(bold_item, block)
    block = _TITLE_FIELD.sub(title_field, block)
    block = _URL_FIELD.sub(url_field, block)
    block = _COLON_ITEM.sub(colon_item, block)
    block = _RISKY_SCALAR.sub(risky_scalar, block)
    return block


# ═══════════════════════════════════════════════════════════════════════════════
# STRATEGIES
# ═══════════════════════════════════════════════════════════════════════════════

def decode_yaml(block: str) -> Dict[str, Any]:
    """Decode a metadata block; anything but a mapping is a ParseError."""
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise ParseError(f"YAML decode failed: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"Frontmatter is not a mapping (got {type(data).__name__})")
    return data


def decode_sanitized(block: str, body: str) -> Optional[ParsedDocument]:
    try:
        metadata = decode_yaml(sanitize_yaml(block))
    except ParseError as e:
        log("PARSER", f"Sanitized decode failed, falling back: {e.message[:200]}")
        return None
    return ParsedDocument(metadata=metadata, body=body, strategy="yaml")


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1].strip()
    return value.strip("\"'").strip()


def _extract_section(block: str, name: str) -> Optional[str]:
    match = re.search(rf"^{name}:[ \t]*\n(.*?)(?=^[a-z_]+:|\Z)", block, re.MULTILINE | re.DOTALL)
    return match.group(1) if match else None


def _extract_scores(block: str) -> List[Dict[str, Any]]:
    section = _extract_section(block, "scores")
    if not section:
        return []

    scores: List[Dict[str, Any]] = []
    for item in re.split(r"^[ \t]*-[ \t]+(?=executor:)", section, flags=re.MULTILINE)[1:]:
        executor = re.search(r"executor:[ \t]*(.+)", item)
        if not executor:
            continue
        entry: Dict[str, Any] = {"executor": _strip_quotes(executor.group(1))}
        total = re.search(r"weighted_total:[ \t]*\"?([-\d.]+)", item)
        if total:
            try:
                entry["weighted_total"] = float(total.group(1))
            except ValueError:
                pass
        notes = re.search(r"notes:[ \t]*(.+)", item)
        if notes:
            entry["notes"] = _strip_quotes(notes.group(1))
        scores.append(entry)
    return scores


def regex_fallback(block: str, body: str, profile: FallbackProfile) -> Optional[ParsedDocument]:
    """
    Targeted field recovery from the raw (un-sanitized) block.

    Returns None unless every field in profile.required was found.
    """
    metadata: Dict[str, Any] = {}

    for name in profile.string_fields:
        match = re.search(rf"^{name}:[ \t]*\"?([^\"\n]+)\"?", block, re.MULTILINE)
        if match:
            metadata[name] = _strip_quotes(match.group(1))

    for name in profile.array_fields:
        match = re.search(rf"^{name}:[ \t]*\n((?:[ \t]*-[ \t]+.+\n?)+)", block, re.MULTILINE)
        if match:
            items = re.findall(r"^[ \t]*-[ \t]+(.+)$", match.group(1), re.MULTILINE)
            metadata[name] = [_strip_quotes(item) for item in items]

    if profile.extract_sources:
        section = _extract_section(block, "sources")
        if section:
            urls = re.findall(r"url:[ \t]*(\S+)", section)
            if urls:
                metadata["sources"] = [{"url": _strip_quotes(url)} for url in urls]

    if profile.extract_scores:
        scores = _extract_scores(block)
        if scores:
            metadata["scores"] = scores

    missing = [name for name in profile.required if not metadata.get(name)]
    if missing or (profile.require_body and not body):
        log("PARSER", f"Regex fallback ({profile.name}) missing required fields: {missing or ['body']}")
        return None

    return ParsedDocument(metadata=metadata, body=body, strategy="regex")


Strategy = Callable[[str, str], Optional[ParsedDocument]]


def build_strategies(profile: FallbackProfile) -> List[Strategy]:
    """The ordered cascade for one caller profile."""
    return [
        decode_sanitized,
        partial(regex_fallback, profile=profile),
    ]


# ═══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════════════════════════════════════════

def parse_frontmatter(raw: Optional[str], profile: FallbackProfile = IDEA_PROFILE) -> Optional[ParsedDocument]:
    """
    Parse model output into metadata + body.

    Args:
        raw: Raw model response
        profile: Fields the regex fallback should recover and require

    Returns:
        ParsedDocument, or None if no usable frontmatter was found
    """
    if not raw or not isinstance(raw, str):
        return None

    text = strip_preamble(unwrap_code_fence(raw.strip()))
    parts = split_frontmatter(text)
    if parts is None:
        log("PARSER", "No frontmatter delimiters found")
        return None

    block, body = parts
    for strategy in build_strategies(profile):
        result = strategy(block, body)
        if result is not None:
            return result
    return None


def dump_frontmatter(metadata: Dict[str, Any], body: str) -> str:
    """Serialize metadata + body back into the --- delimited format."""
    block = yaml.safe_dump(
        metadata,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=10_000,
    )
    return f"---\n{block}---\n\n{body}".rstrip() + "\n"
