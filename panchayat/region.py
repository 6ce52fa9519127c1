'''Vote totals over nested electoral regions.

Regions form a tree: a district holds blocks, a block holds villages, and
so on. Each node carries the votes counted directly in it. A node is either
a :class:`Region` or a mapping such as
``{'name': 'root', 'votes': 5, 'subRegions': [...]}``.
'''

import collections.abc
import logging
from numbers import Real
from typing import Any, List, Optional

from panchayat.persist import simple_serialization
from panchayat.util import Record, is_record, is_number, is_sequence, get_field

logger = logging.getLogger(__name__)

SUBREGION_KEYS = ('subRegions', 'sub_regions')


@simple_serialization
class Region(Record):
    '''A region with votes counted directly in it and nested subregions.

    :param name: Name of the region.
    :param votes: Number of votes counted in the region itself, not including
        its subregions.
    :param sub_regions: Regions nested in this one.
    '''
    def __init__(self,
                 name: str,
                 votes: Real = 0,
                 sub_regions: Optional[List[Any]] = None,
                 ):
        self.name = name
        self.votes = votes
        self.sub_regions = sub_regions if sub_regions is not None else []

    def __repr__(self) -> str:
        return f'<Region({self.name},{self.votes})>'


def get_sub_regions(node: Any) -> List[Any]:
    '''Return the subregions of a node, empty if absent or not a sequence.'''
    if isinstance(node, collections.abc.Mapping):
        for key in SUBREGION_KEYS:
            if key in node:
                subs = node[key]
                break
        else:
            subs = None
    else:
        subs = get_field(node, 'sub_regions')
    return subs if is_sequence(subs) else []


def _has_votes(node: Any) -> bool:
    if not is_record(node):
        return False
    votes = get_field(node, 'votes')
    if not is_number(votes):
        logger.debug('skipping region with invalid votes: %r', votes)
        return False
    return True


def count_votes_in_regions(region_tree: Any) -> Real:
    '''Count the votes in a region and all of its subregions.

    Each region's total is its own votes plus the totals of its subregions
    summed in their listed order. Malformed nodes (anything that is not a
    record, or a record whose votes are not a number) count as zero together
    with everything below them, at any depth of the tree. A region nested
    inside itself counts as malformed where it recurs. The tree is walked with
    an explicit stack so there is no limit on its depth.

    :param region_tree: Root region node; None is allowed.
    :returns: Total number of votes in the tree.
    '''
    if not _has_votes(region_tree):
        return 0
    # frames of [node, subregions, next subregion index, subregion total]
    stack = [[region_tree, get_sub_regions(region_tree), 0, 0]]
    on_path = {id(region_tree)}
    while True:
        frame = stack[-1]
        node, subs, sub_i, sub_total = frame
        if sub_i < len(subs):
            frame[2] += 1
            child = subs[sub_i]
            if id(child) in on_path:
                logger.debug('skipping cyclic region: %r',
                             get_field(child, 'name'))
            elif _has_votes(child):
                on_path.add(id(child))
                stack.append([child, get_sub_regions(child), 0, 0])
            continue
        stack.pop()
        on_path.discard(id(node))
        total = get_field(node, 'votes') + sub_total
        if not stack:
            return total
        stack[-1][3] += total
