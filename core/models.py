# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the ask resolver)
# =============================================================================
#
# These dataclasses define the shape of everything that flows between the
# text extractors, the scorers, the traverser and the CMS collaborators.
# They carry almost no behaviour: a few read-only helpers and a to_dict()
# on the types that leave the process as JSON.
#
# NAMING:
#   Python attributes are snake_case.  The CMS speaks camelCase JSON
#   ("displayName", "parentLink", "guidValue"), so the conversion happens in
#   to_dict() and in the parsers in core/cms_client.py, never in between.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional


# -----------------------------------------------------------------------------
# Content-type schema
# -----------------------------------------------------------------------------
# Fetched fresh for every ask.  Nothing here is cached between invocations.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PropertyDescriptor:
    """One editable property of a content type (e.g. "Heading")."""

    name: str
    display_name: str = ""


@dataclass(frozen=True)
class ContentTypeDescriptor:
    """A content type as returned by the content definitions API."""

    name: str                          # Model name, e.g. "CtaCardBlock"
    display_name: str                  # Editor-facing name, e.g. "CTA Card Block"
    properties: tuple[PropertyDescriptor, ...] = ()
    base_type: Optional[str] = None    # Only set when the CMS declares one

    @property
    def property_names(self) -> list[str]:
        return [prop.name for prop in self.properties]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "properties": [
                {"name": prop.name, "displayName": prop.display_name}
                for prop in self.properties
            ],
        }


# -----------------------------------------------------------------------------
# ParentLink — "exactly one of id / guidValue"
# -----------------------------------------------------------------------------
# Building one with both or neither is a bug in the caller, so it raises
# immediately instead of travelling on to the CMS as a malformed payload.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ParentLink:
    """Reference to the container a content item lives under."""

    id: Optional[int] = None
    guid_value: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.id is None) == (self.guid_value is None):
            raise ValueError("ParentLink needs exactly one of id or guid_value")

    @property
    def identifier(self) -> str:
        return str(self.id) if self.id is not None else self.guid_value

    def to_dict(self) -> dict:
        if self.id is not None:
            return {"id": self.id}
        return {"guidValue": self.guid_value}


# -----------------------------------------------------------------------------
# Content tree
# -----------------------------------------------------------------------------
@dataclass
class StructureNode:
    """A node of the remote content tree with its children embedded inline.

    Either id or guid (or both) is normally present.  Nodes with neither
    get a synthesized key during traversal (see core/structure.py).
    """

    name: str = ""
    id: Optional[int] = None
    guid: Optional[str] = None
    children: list["StructureNode"] = field(default_factory=list)

    def link(self) -> Optional[ParentLink]:
        """ParentLink for this node, preferring the numeric id."""
        if self.id is not None:
            return ParentLink(id=self.id)
        if self.guid:
            return ParentLink(guid_value=self.guid)
        return None

    def to_dict(self) -> dict:
        # Children are deliberately left out: snapshots are flat.
        return {"id": self.id, "guid": self.guid, "name": self.name}


@dataclass
class StructureSnapshot:
    """A root node plus every descendant visited, as one flat list."""

    root: StructureNode
    children: list[StructureNode] = field(default_factory=list)
    visited: int = 0                   # Distinct nodes seen, root included
    truncated: bool = False            # True when max_nodes cut traversal short

    def to_dict(self) -> dict:
        result = self.root.to_dict()
        result["children"] = [child.to_dict() for child in self.children]
        result["visited"] = self.visited
        result["truncated"] = self.truncated
        return result


@dataclass
class ParentCandidate:
    """A node proposed as container for new content, with its score."""

    identifier: str
    score: int
    parent_link: ParentLink
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "identifier": self.identifier,
            "name": self.name,
            "score": self.score,
            "parentLink": self.parent_link.to_dict(),
        }


# -----------------------------------------------------------------------------
# Intents and payloads
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class MoveIntent:
    """A parsed "move X under Y".  parent_link is None when Y was not found."""

    content_identifier: str
    parent_link: Optional[ParentLink] = None


# property name -> {"value": "..."}
FieldAssignments = dict[str, dict[str, str]]


@dataclass
class ContentCreatePayload:
    """Body of the content-management create call."""

    name: str
    language: str
    content_type: tuple[str, str]      # (base type, model name)
    parent_link: ParentLink
    status: str
    fields: FieldAssignments = field(default_factory=dict)

    def to_dict(self) -> dict:
        payload = {
            "name": self.name,
            "language": {"name": self.language},
            "contentType": list(self.content_type),
            "parentLink": self.parent_link.to_dict(),
            "status": self.status,
        }
        for prop, value in self.fields.items():
            # A property named like a payload key must not clobber it.
            payload.setdefault(prop, dict(value))
        return payload


# -----------------------------------------------------------------------------
# Results handed back to the caller
# -----------------------------------------------------------------------------
@dataclass
class DelegateResult:
    """What the Create / Move collaborator returned."""

    status: int
    body: Any = None

    def to_dict(self) -> dict:
        return {"status": self.status, "body": self.body}


@dataclass
class ClarificationResult:
    """A successful "please be more specific" answer.  No content was changed."""

    message: str
    proposals: Optional[list[ParentCandidate]] = None

    def to_dict(self) -> dict:
        result: dict = {"message": self.message}
        if self.proposals is not None:
            result["proposals"] = [p.to_dict() for p in self.proposals]
        return result
