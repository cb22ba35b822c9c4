"""
NWS Atom alert feed parser

Scrapes <entry> blocks out of raw feed text with regular expressions
instead of an XML parser, so truncated or slightly broken feeds still
yield whatever entries are recognisable. Missing fields come back as None.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..geo import parse_polygon
from .geocode import decode_geocodes

_NS = r'(?:[A-Za-z0-9_]+:)?'

ENTRY_RE = re.compile(r'<entry\b[\s\S]*?</entry>', re.IGNORECASE)
LINK_RE = re.compile(r'<link\b[^>]*?\bhref\s*=\s*["\']([^"\']+)["\']', re.IGNORECASE)
CDATA_RE = re.compile(r'<!\[CDATA\[([\s\S]*?)\]\]>')

_field_patterns: Dict[str, re.Pattern] = {}


@dataclass
class AlertEntry:
    """One alert as listed in an Atom feed."""
    id: Optional[str] = None
    title: Optional[str] = None
    summary: Optional[str] = None
    event: Optional[str] = None
    severity: Optional[str] = None
    area_desc: Optional[str] = None
    updated: Optional[str] = None
    effective: Optional[str] = None
    expires: Optional[str] = None
    link: Optional[str] = None
    ugc: List[str] = field(default_factory=list)
    fips6: List[str] = field(default_factory=list)
    polygon: Optional[List[Tuple[float, float]]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'title': self.title,
            'summary': self.summary,
            'updated': self.updated,
            'effective': self.effective,
            'expires': self.expires,
            'areaDesc': self.area_desc,
            'severity': self.severity,
            'event': self.event,
            'link': self.link,
            'ugc': list(self.ugc),
            'fips6': list(self.fips6),
            'polygon': [[lat, lon] for lat, lon in self.polygon] if self.polygon else None
        }


def _field_pattern(tag: str) -> re.Pattern:
    pattern = _field_patterns.get(tag)
    if pattern is None:
        name = re.escape(tag)
        pattern = re.compile(
            rf'<{_NS}{name}(?:\s[^>]*)?>([\s\S]*?)</{_NS}{name}\s*>',
            re.IGNORECASE
        )
        _field_patterns[tag] = pattern
    return pattern


def split_entries(xml: str) -> List[str]:
    """Raw text of every <entry> block, in document order."""
    if not xml:
        return []
    return ENTRY_RE.findall(xml)


def extract_field(block: str, tag: str) -> Optional[str]:
    """
    Text of the first <tag> or <prefix:tag> element in `block`.

    CDATA wrappers are unwrapped and surrounding whitespace removed.
    """
    match = _field_pattern(tag).search(block)
    if not match:
        return None
    return CDATA_RE.sub(r'\1', match.group(1)).strip()


def extract_link(block: str) -> Optional[str]:
    """href of the first <link> element."""
    match = LINK_RE.search(block)
    return match.group(1) if match else None


def parse_entry(block: str) -> AlertEntry:
    """Build an AlertEntry from one <entry> block."""
    ugc, fips6 = decode_geocodes(block)

    return AlertEntry(
        id=extract_field(block, 'id'),
        title=extract_field(block, 'title'),
        summary=extract_field(block, 'summary'),
        event=extract_field(block, 'event'),
        severity=extract_field(block, 'severity'),
        area_desc=extract_field(block, 'areaDesc'),
        updated=extract_field(block, 'updated') or extract_field(block, 'sent'),
        effective=extract_field(block, 'effective'),
        expires=extract_field(block, 'expires'),
        link=extract_link(block),
        ugc=ugc,
        fips6=fips6,
        polygon=parse_polygon(extract_field(block, 'polygon'))
    )


def parse_atom(xml: str) -> List[AlertEntry]:
    """
    Parse an Atom alert feed.

    A document without any <entry> block yields an empty list; this never
    raises on malformed markup.
    """
    return [parse_entry(block) for block in split_entries(xml)]
