from typing import Iterable, Iterator, List, Optional, Tuple

from core.errors import DuplicateId
from models.member import Member


class Roster:
    """
    All members of the gym, in the order they were added.
    Member IDs are unique; members are never removed one by one.
    """

    def __init__(self) -> None:
        self._members: List[Member] = []

    def add(self, member: Member) -> None:
        """Appends a member. Raises DuplicateId if the ID is taken."""
        if self.exists(member.id):
            raise DuplicateId(member.id)
        self._members.append(member)

    def find_by_id(self, member_id: int) -> Optional[Member]:
        """Returns the member with this ID, or None."""
        for member in self._members:
            if member.id == member_id:
                return member
        return None

    def exists(self, member_id: int) -> bool:
        return self.find_by_id(member_id) is not None

    def all(self) -> Tuple[Member, ...]:
        return tuple(self._members)

    def clear(self) -> None:
        self._members.clear()

    def replace(self, members: Iterable[Member]) -> None:
        """
        Swaps the whole content for `members`.
        Raises DuplicateId (and keeps the current content) if two share an ID.
        """
        incoming = list(members)
        seen = set()
        for member in incoming:
            if member.id in seen:
                raise DuplicateId(member.id)
            seen.add(member.id)

        self._members = incoming

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Member]:
        return iter(tuple(self._members))
