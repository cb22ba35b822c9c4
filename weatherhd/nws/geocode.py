"""
Geocode decoding for NWS Atom entries.

An entry carries one or more blocks like

    <cap:geocode>
        <valueName>FIPS6</valueName>
        <value>013121 013089</value>
        <valueName>UGC</valueName>
        <value>GAZ044 GAZ045</value>
    </cap:geocode>

where every <value> after a <valueName> belongs to it until the next
<valueName>.
"""

import re
from typing import List, Tuple

_NS = r'(?:[A-Za-z0-9_]+:)?'

GEOCODE_RE = re.compile(rf'<{_NS}geocode\b[\s\S]*?</{_NS}geocode>', re.IGNORECASE)
VALUE_NAME_RE = re.compile(rf'<{_NS}valueName\b[^>]*>([\s\S]*?)</{_NS}valueName>', re.IGNORECASE)
VALUE_RE = re.compile(rf'<{_NS}value\b[^>]*>([\s\S]*?)</{_NS}value>', re.IGNORECASE)
CODE_SPLIT_RE = re.compile(r'[\s,;]+')


def _codes_for(block: str, name: str) -> List[str]:
    """All codes listed under every <valueName>name</valueName> in one block."""
    codes = []
    headers = list(VALUE_NAME_RE.finditer(block))
    for index, header in enumerate(headers):
        if header.group(1).strip().upper() != name:
            continue
        stop = headers[index + 1].start() if index + 1 < len(headers) else len(block)
        segment = block[header.end():stop]
        for value in VALUE_RE.findall(segment):
            codes.extend(code for code in CODE_SPLIT_RE.split(value) if code)
    return codes


def decode_geocodes(entry: str) -> Tuple[List[str], List[str]]:
    """
    Extract UGC and FIPS6 codes from an entry's raw text.

    Returns:
        (ugc, fips6) in encounter order, duplicates kept. UGC codes are
        upper-cased; FIPS6 codes are returned as written.
    """
    ugc: List[str] = []
    fips6: List[str] = []

    for block in GEOCODE_RE.findall(entry):
        ugc.extend(code.upper() for code in _codes_for(block, 'UGC'))
        fips6.extend(_codes_for(block, 'FIPS6'))

    return ugc, fips6
