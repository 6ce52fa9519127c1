'''Candidate and voter records.

Both records are lightweight value holders; the election machinery accepts
them interchangeably with plain mappings of the same keys, such as
``{'id': 'C1', 'name': 'Sarpanch Ram', 'party': 'Janata'}``.
'''

from panchayat.persist import simple_serialization
from panchayat.util import Record


@simple_serialization
class Candidate(Record):
    '''A person standing for the election.

    The candidate is identified by its id; the name and party are carried
    through to the election results unchanged.

    :param id: Unique identifier of the candidate within the election.
    :param name: Name of the candidate, in any customary text format.
    :param party: Party the candidate is standing for.
    '''
    def __init__(self, id: str, name: str, party: str = ''):
        self.id = id
        self.name = name
        self.party = party

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Candidate)
            and (self.id, self.name, self.party)
            == (other.id, other.name, other.party)
        )

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f'<Candidate({self.id},{self.name})>'


@simple_serialization
class Voter(Record):
    '''A person wishing to vote.

    :param id: Unique identifier of the voter.
    :param name: Name of the voter.
    :param age: Age of the voter in years.
    '''
    def __init__(self, id: str, name: str, age):
        self.id = id
        self.name = name
        self.age = age

    def __repr__(self) -> str:
        return f'<Voter({self.id},{self.age})>'
