"""Package relationship parts (``_rels/*.rels``)."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass

DOCUMENT_SCHEMA = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_SCHEMA = "http://schemas.openxmlformats.org/package/2006/relationships"


@dataclass
class Relationship:
    id: str
    type: str
    target: str
    target_mode: str = ""


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


class Relationships:
    """An ordered list of relationships with ``rIdN`` identifiers."""

    def __init__(self) -> None:
        self._items: list[Relationship] = []

    def add_worksheet_relationship(
        self, relative_type: str, target: str, target_mode: str = ""
    ) -> Relationship:
        """Add a relationship whose type is the document schema plus ``relative_type``."""
        relationship = Relationship(
            id=f"rId{len(self._items) + 1}",
            type=DOCUMENT_SCHEMA + relative_type,
            target=target,
            target_mode=target_mode,
        )
        self._items.append(relationship)
        return relationship

    def worksheet_relationships(self, relative_type: str) -> list[Relationship]:
        wanted = DOCUMENT_SCHEMA + relative_type
        return [item for item in self._items if item.type == wanted]

    def get_by_id(self, rel_id: str) -> Relationship | None:
        return next((item for item in self._items if item.id == rel_id), None)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Relationship]:
        return iter(self._items)

    def to_xml(self) -> bytes:
        root = ET.Element("Relationships", {"xmlns": PACKAGE_SCHEMA})
        for item in self._items:
            attributes = {"Id": item.id, "Type": item.type, "Target": item.target}
            if item.target_mode:
                attributes["TargetMode"] = item.target_mode
            ET.SubElement(root, "Relationship", attributes)
        return ET.tostring(root, encoding="UTF-8", xml_declaration=True)

    @classmethod
    def from_xml(cls, data: bytes | str) -> Relationships:
        root = ET.fromstring(data)
        relationships = cls()
        for element in root.iter():
            if _local_name(element.tag) != "Relationship":
                continue
            relationships._items.append(
                Relationship(
                    id=element.get("Id", ""),
                    type=element.get("Type", ""),
                    target=element.get("Target", ""),
                    target_mode=element.get("TargetMode", ""),
                )
            )
        return relationships