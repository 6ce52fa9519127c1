'''Shape checks shared by the modules of Panchayat.

Election inputs arrive either as instances of the record classes defined in
this package or as plain mappings (typically decoded from JSON). These helpers
let the other modules read both forms uniformly and decide when an input is
malformed. There should normally be no need to use these functions directly.
'''

import abc
import collections.abc
from numbers import Real
from typing import Any


class Record(metaclass=abc.ABCMeta):
    '''An abstract base for the attribute-based record classes.

    Instances of subclasses and any :class:`collections.abc.Mapping` are
    accepted wherever a record (candidate, voter, region node) is expected.
    '''


def is_record(value: Any) -> bool:
    '''Return True if the value is a well-formed record object.'''
    return isinstance(value, (collections.abc.Mapping, Record))


def is_number(value: Any) -> bool:
    '''Return True for real numbers; booleans do not count.'''
    return isinstance(value, Real) and not isinstance(value, bool)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def get_field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, collections.abc.Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def has_field(record: Any, name: str) -> bool:
    '''Return True if the field is present, regardless of its value.'''
    if isinstance(record, collections.abc.Mapping):
        try:
            return name in record
        except TypeError:
            # unhashable names are never keys
            return False
    return isinstance(name, str) and hasattr(record, name)
