"""People XML formatter — maps the Person IR onto the nested XML layout.

WHY: Downstream systems consume one ``<people>`` document with a
``<person>`` element per record. Writing the root tags by hand and each
person as a self-contained subtree lets the assembler stream the
document without ever holding more than one person in memory.

HOW: Small mapping functions turn each IR dataclass into an XMLElement,
skipping every absent value. PeopleXMLFormatter renders the root open
and close tags as plain text and each person through the XML tree
utility at one level of indentation.

RULES:
- person: firstname?, lastname?, address?, phone?, family*
- family: firstname?, born?, address?, phone?
- address: street?, city?, zip?   phone: mobile?, landline?
- A None value produces no element; "" produces an empty element
- Family elements follow insertion order
- Person elements are indented one level inside the root
"""

from __future__ import annotations

from people_converter.adapters.xml_tree import XMLElement
from people_converter.config import DEFAULT_ROOT_ELEMENT
from people_converter.core.ir import Address, FamilyMember, Person, Phone
from people_converter.formatters.base import BaseStreamFormatter


def _add_optional(element: XMLElement, name: str, value: str | None) -> None:
    if value is not None:
        element.add_child_value(name, value)


def address_to_xml(address: Address) -> XMLElement:
    element = XMLElement("address")
    _add_optional(element, "street", address.street)
    _add_optional(element, "city", address.city)
    _add_optional(element, "zip", address.zip)
    return element


def phone_to_xml(phone: Phone) -> XMLElement:
    element = XMLElement("phone")
    _add_optional(element, "mobile", phone.mobile)
    _add_optional(element, "landline", phone.landline)
    return element


def family_member_to_xml(member: FamilyMember) -> XMLElement:
    element = XMLElement("family")
    _add_optional(element, "firstname", member.first_name)
    _add_optional(element, "born", member.born)
    if member.address is not None:
        element.add_child(address_to_xml(member.address))
    if member.phone is not None:
        element.add_child(phone_to_xml(member.phone))
    return element


def person_to_xml(person: Person) -> XMLElement:
    """Build the ``<person>`` element, including all family members."""
    element = XMLElement("person")
    _add_optional(element, "firstname", person.first_name)
    _add_optional(element, "lastname", person.last_name)
    if person.address is not None:
        element.add_child(address_to_xml(person.address))
    if person.phone is not None:
        element.add_child(phone_to_xml(person.phone))
    for member in person.family:
        element.add_child(family_member_to_xml(member))
    return element


class PeopleXMLFormatter(BaseStreamFormatter):
    """Formatter producing the ``<people><person>...</person></people>`` document.

    RULES:
    - Root tag lines are written on their own, without indentation
    - Each person is a complete, indented subtree followed by a newline
    """

    def __init__(self, root_element: str = DEFAULT_ROOT_ELEMENT) -> None:
        self.root_element = root_element

    @property
    def name(self) -> str:
        return "People XML"

    def open_document(self) -> str:
        return "<{}>\n".format(self.root_element)

    def format_person(self, person: Person) -> str:
        return person_to_xml(person).to_string(indent_level=1) + "\n"

    def close_document(self) -> str:
        return "</{}>\n".format(self.root_element)
