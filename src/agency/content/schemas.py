"""Pydantic schemas for source documents."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from agency.locale import DEFAULT_LOCALE, SUPPORTED_LOCALES

LocalizedText = str | dict[str, str]
RichText = dict[str, Any]


class SourceDocument(BaseModel):
    """Fields shared by every collection.

    Unknown fields are kept so editors can add data without a schema
    change; they flow through to the search hook untouched.
    """

    model_config = ConfigDict(extra="allow")

    slug: LocalizedText | None = None


class ArtistDocument(SourceDocument):
    """Artist profile."""

    name: str = ""
    instrument: list[str] = Field(default_factory=list)
    contact_persons: list[str] = Field(
        default_factory=list,
        description="Employee ids responsible for this artist",
    )


class EmployeeDocument(SourceDocument):
    """Agency staff member."""

    name: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    position: LocalizedText | None = None


class PostDocument(SourceDocument):
    """News or project post."""

    title: LocalizedText = ""
    content: RichText | None = None
    categories: list[str] = Field(default_factory=list)


class RepertoireDocument(SourceDocument):
    """Repertoire entry."""

    title: LocalizedText = ""
    content: RichText | None = None


class PageDocument(SourceDocument):
    """Static page such as the imprint or about page."""

    title: LocalizedText = ""
    content: RichText | None = None


COLLECTION_SCHEMAS: dict[str, type[SourceDocument]] = {
    "artists": ArtistDocument,
    "employees": EmployeeDocument,
    "posts": PostDocument,
    "repertoire": RepertoireDocument,
    "pages": PageDocument,
}


class ContactPerson(BaseModel):
    """Employee reachable about an artist."""

    id: str
    name: str
    email: str


def is_localized(value: Any) -> bool:
    """Check whether a field value is a per-locale map like {"de": ..., "en": ...}."""
    return (
        isinstance(value, dict)
        and bool(value)
        and all(key in SUPPORTED_LOCALES for key in value)
    )


def localize_value(value: Any, locale: str, fallback_locale: str = DEFAULT_LOCALE) -> Any:
    """Resolve a possibly localized field value for one locale.

    Args:
        value: Plain value or per-locale map.
        locale: Requested locale.
        fallback_locale: Locale used when the requested one is missing.

    Returns:
        The value for the locale, the fallback locale's value, or the
        plain value unchanged.
    """
    if not is_localized(value):
        return value
    if locale in value:
        return value[locale]
    return value.get(fallback_locale)
