"""Intermediate representation dataclasses for assembled person records.

WHY: The legacy row format is flat: a person's phone, address and family
members arrive on separate lines. The XML output is nested. The IR gives
the assembler a well-typed tree to fill in while rows stream past, and
gives formatters a single structure to serialize.

HOW: Four dataclasses form a hierarchy:
  Address      — street, city, zip
  Phone        — mobile, landline
  FamilyMember — first name, birth year, optional Address / Phone
  Person       — first/last name, optional Address / Phone, family list
Target is the tagged "current individual" reference that decides where
T and A rows attach.

RULES:
- Every text field is Optional; an absent field is None, never ""-padded
- Each individual owns at most one Address and at most one Phone
- FamilyMember instances belong to exactly one Person's family list
- Builders take field positions from the row grammar:
  P|first|last, F|first|born, A|street|city|zip, T|mobile|landline
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from people_converter.core.lexer import Row


@dataclass
class Address:
    """Postal address of a person or a family member."""

    street: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None

    @classmethod
    def from_row(cls, row: Row) -> Address:
        return cls(street=row.part(0), city=row.part(1), zip=row.part(2))


@dataclass
class Phone:
    """Phone numbers of a person or a family member."""

    mobile: Optional[str] = None
    landline: Optional[str] = None

    @classmethod
    def from_row(cls, row: Row) -> Phone:
        return cls(mobile=row.part(0), landline=row.part(1))


@dataclass
class FamilyMember:
    """A family member listed under a Person.

    WHY: Family members carry their own address and phone, distinct from
    the person they belong to.

    RULES:
    - Created by an F row, owned by the Person open at that moment
    - Becomes the target of T/A rows until the next F or P row
    """

    first_name: Optional[str] = None
    born: Optional[str] = None
    address: Optional[Address] = None
    phone: Optional[Phone] = None

    @classmethod
    def from_row(cls, row: Row) -> FamilyMember:
        return cls(first_name=row.part(0), born=row.part(1))


@dataclass
class Person:
    """A top-level person record, the unit of streaming output.

    WHY: Output is flushed one person at a time so memory use is bounded
    by the largest single person, not by the size of the input.

    RULES:
    - Created by a P row; completed by the next P row or end of input
    - family keeps insertion order (the order F rows were seen)
    - Discarded by the assembler once serialized
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[Address] = None
    phone: Optional[Phone] = None
    family: list[FamilyMember] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Row) -> Person:
        return cls(first_name=row.part(0), last_name=row.part(1))


Individual = Union[Person, FamilyMember]


class TargetKind(Enum):
    """Which kind of individual T/A rows currently attach to."""

    NONE = "none"
    PERSON = "person"
    FAMILY_MEMBER = "family_member"


@dataclass(frozen=True)
class Target:
    """Tagged reference to the individual receiving T/A rows.

    RULES:
    - kind NONE always has individual None
    - kind PERSON / FAMILY_MEMBER always carries the matching instance
    """

    kind: TargetKind
    individual: Optional[Individual] = None

    @classmethod
    def none(cls) -> Target:
        return cls(TargetKind.NONE)

    @classmethod
    def person(cls, person: Person) -> Target:
        return cls(TargetKind.PERSON, person)

    @classmethod
    def family_member(cls, member: FamilyMember) -> Target:
        return cls(TargetKind.FAMILY_MEMBER, member)

    @property
    def is_open(self) -> bool:
        return self.kind is not TargetKind.NONE
