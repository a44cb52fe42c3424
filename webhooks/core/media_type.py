"""Content-Type parsing and body type classification.

Matching is deliberately looser than string equality: parameters such as
``charset`` are ignored unless the reference media type names them, and vendor
types with a ``+json`` / ``+xml`` suffix count as JSON / XML. The suffix rule
only applies to ``application/*``. Public registrations show essentially no
``text/*+json`` or ``text/*+xml`` types and downstream parsers reject them.
"""

import re
from dataclasses import dataclass

from webhooks.models.core import BodyType

_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_MEDIA_TYPE_RE = re.compile(rf"\s*(?P<type>{_TOKEN})/(?P<subtype>{_TOKEN})\s*")
_PARAMETER_RE = re.compile(
    rf';\s*(?P<name>{_TOKEN})\s*=\s*(?:"(?P<quoted>(?:[^"\\]|\\.)*)"|(?P<token>{_TOKEN}))\s*'
)
_QUOTED_PAIR_RE = re.compile(r"\\(.)")


@dataclass(frozen=True, slots=True)
class MediaType:
    """Parsed media type: type, subtype and lowercase-named parameters."""

    type: str
    subtype: str
    parameters: tuple[tuple[str, str], ...] = ()

    @classmethod
    def parse(cls, value: str | None) -> "MediaType | None":
        """Parse a Content-Type header value. None when missing or malformed."""
        if not value:
            return None
        return _parse(value)

    @property
    def essence(self) -> str:
        return f"{self.type}/{self.subtype}".lower()

    @property
    def charset(self) -> str | None:
        return self.get_parameter("charset")

    def get_parameter(self, name: str) -> str | None:
        name = name.lower()
        return next((value for key, value in self.parameters if key == name), None)

    def is_subset_of(self, other: "MediaType") -> bool:
        """Whether this media type falls within the (possibly wildcard) range other."""
        if other.type != "*" and self.type.lower() != other.type.lower():
            return False

        if other.subtype.startswith("*+"):
            if not self.subtype.lower().endswith(other.subtype[1:].lower()):
                return False
        elif other.subtype != "*" and self.subtype.lower() != other.subtype.lower():
            return False

        for name, expected in other.parameters:
            actual = self.get_parameter(name)
            if actual is None:
                return False
            if name == "charset":
                if actual.lower() != expected.lower():
                    return False
            elif actual != expected:
                return False
        return True

    def __str__(self) -> str:
        params = "".join(f"; {name}={value}" for name, value in self.parameters)
        return f"{self.type}/{self.subtype}{params}"


def _parse(value: str) -> MediaType | None:
    match = _MEDIA_TYPE_RE.match(value)
    if not match:
        return None

    parameters: list[tuple[str, str]] = []
    position = match.end()
    while position < len(value):
        param = _PARAMETER_RE.match(value, position)
        if not param:
            # Tolerate a trailing ';' with nothing after it.
            if value[position:].strip() == ";":
                break
            return None
        quoted = param.group("quoted")
        param_value = _QUOTED_PAIR_RE.sub(r"\1", quoted) if quoted is not None else param.group("token")
        parameters.append((param.group("name").lower(), param_value))
        position = param.end()

    return MediaType(match.group("type"), match.group("subtype"), tuple(parameters))


APPLICATION_JSON = MediaType("application", "json")
TEXT_JSON = MediaType("text", "json")
APPLICATION_XML = MediaType("application", "xml")
TEXT_XML = MediaType("text", "xml")
FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"


def is_form(media_type: MediaType | None) -> bool:
    """Form content detection: url-encoded or multipart form data."""
    return media_type is not None and media_type.essence in (FORM_URLENCODED, MULTIPART_FORM_DATA)


def _has_application_suffix(media_type: MediaType, suffix: str) -> bool:
    return media_type.type.lower() == "application" and media_type.subtype.lower().endswith(suffix)


def is_json(media_type: MediaType | None) -> bool:
    """application/json, text/json or application/*+json (e.g. application/hal+json)."""
    if media_type is None:
        return False
    if media_type.is_subset_of(APPLICATION_JSON) or media_type.is_subset_of(TEXT_JSON):
        return True
    return _has_application_suffix(media_type, "+json")


def is_xml(media_type: MediaType | None) -> bool:
    """application/xml, text/xml or application/*+xml (e.g. application/rdf+xml)."""
    if media_type is None:
        return False
    if media_type.is_subset_of(APPLICATION_XML) or media_type.is_subset_of(TEXT_XML):
        return True
    return _has_application_suffix(media_type, "+xml")


def classify_content_type(media_type: MediaType | None) -> BodyType | None:
    """Map a media type to FORM, JSON or XML. None means unclassified."""
    if is_form(media_type):
        return BodyType.FORM
    if is_json(media_type):
        return BodyType.JSON
    if is_xml(media_type):
        return BodyType.XML
    return None
