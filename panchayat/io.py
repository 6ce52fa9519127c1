"""Loading of election files.

An election file is a JSON document describing a complete election::

    {
        "candidates": [{"id": "C1", "name": "Sarpanch Ram", "party": "Janata"}],
        "voters": [{"id": "V1", "name": "Mohan", "age": 25}],
        "ballots": [{"voter": "V1", "candidate": "C1"}],
        "regions": {"name": "Gram", "votes": 1, "subRegions": []}
    }

Only ``candidates`` is mandatory. Voter records and the region tree are
passed on as they are, so that the validators and counters can judge them.
"""

import dataclasses
import json
from typing import Any, List, Optional, TextIO, Tuple

from panchayat.candidate import Candidate


class ParseError(Exception):
    """An input that is not a valid election file was detected."""
    pass


@dataclasses.dataclass
class ElectionData:
    """A container for the contents of an election file."""
    candidates: List[Candidate]
    voters: List[Any] = dataclasses.field(default_factory=list)
    ballots: List[Tuple[Any, Any]] = dataclasses.field(default_factory=list)
    regions: Optional[Any] = None


def _parse_candidate(record: Any) -> Candidate:
    if not isinstance(record, dict) or 'id' not in record:
        raise ParseError(f'invalid candidate record: {record!r}')
    if isinstance(record['id'], (list, dict)):
        raise ParseError(f'invalid candidate id: {record["id"]!r}')
    return Candidate(
        id=record['id'],
        name=record.get('name', ''),
        party=record.get('party', ''),
    )


def _parse_ballot(record: Any) -> Tuple[Any, Any]:
    if (not isinstance(record, dict)
            or 'voter' not in record or 'candidate' not in record):
        raise ParseError(f'invalid ballot: {record!r}')
    return record['voter'], record['candidate']


def _get_list(payload: dict, key: str) -> List[Any]:
    value = payload.get(key, [])
    if not isinstance(value, list):
        raise ParseError(f'{key} must be a list, got {value!r}')
    return value


def parse(payload: Any) -> ElectionData:
    """Create election data from an already decoded JSON document.

    :raises ParseError: If the document structure is invalid.
    """
    if not isinstance(payload, dict):
        raise ParseError('election file must contain a JSON object')
    if 'candidates' not in payload:
        raise ParseError('election file must list candidates')
    return ElectionData(
        candidates=[_parse_candidate(c) for c in _get_list(payload, 'candidates')],
        voters=_get_list(payload, 'voters'),
        ballots=[_parse_ballot(b) for b in _get_list(payload, 'ballots')],
        regions=payload.get('regions'),
    )


def load(file: TextIO) -> ElectionData:
    """Load election data from an open JSON election file."""
    return loads(file.read())


def loads(text: str) -> ElectionData:
    """Load election data from a JSON string."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f'invalid JSON: {e}') from e
    return parse(payload)
