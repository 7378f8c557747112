"""Pydantic schemas for search records and search API responses."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from agency.content.schemas import ContactPerson


class DocReference(BaseModel):
    """Polymorphic reference from a search record to its source document.

    Attributes:
        relation_to: Source collection (e.g. "artists").
        value: Source document id.
    """

    relation_to: str
    value: str


class SearchRecord(BaseModel):
    """Denormalized search entry, one per source document and locale.

    Attributes:
        id: Row id assigned by the store.
        title: Normalized, stopword-filtered searchable text.
        display_title: Original name or title for display.
        slug: URL slug of the source document.
        locale: Locale the record was built for.
        priority: Ranking weight, higher first.
        doc: Reference to the source document.
        category: Post category ("news" or "projects"), posts only.
    """

    id: int | None = None
    title: str = ""
    display_title: str = ""
    slug: str = ""
    locale: str
    priority: int = 0
    doc: DocReference
    category: str | None = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContactPersonResult(_CamelModel):
    """Contact person attached to artist search results."""

    id: str
    name: str
    email: str

    @classmethod
    def from_contact(cls, contact: ContactPerson) -> "ContactPersonResult":
        return cls(id=contact.id, name=contact.name, email=contact.email)


class SearchResult(_CamelModel):
    """Individual search hit.

    Attributes:
        id: Search record id.
        title: Indexed (normalized) text that matched.
        display_title: Name or title for display.
        slug: URL slug of the source document.
        relation_to: Source collection.
        relation_id: Source document id.
        priority: Ranking weight.
        locale: Locale of the record.
        contact_persons: Reachable contact persons, artists only.
    """

    id: int
    title: str
    display_title: str
    slug: str
    relation_to: str
    relation_id: str
    priority: int
    locale: str
    contact_persons: list[ContactPersonResult] | None = None


class SearchResponse(_CamelModel):
    """Paginated search response envelope."""

    results: list[SearchResult]
    total: int
    limit: int
    offset: int


class ErrorResponse(BaseModel):
    """Error body for client and server errors."""

    error: str = Field(description="Short, non-sensitive error message")
