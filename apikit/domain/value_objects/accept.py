"""Negotiated Accept header value object.

Usage:
    from apikit.domain.value_objects import Accept

    accept = Accept(standards_tree="vnd", subtype="acme", version="v2", format="json")
    accept.media_type  # "application/vnd.acme.v2+json"
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class Accept:
    """Result of parsing ``application/{tree}.{subtype}.{version}+{format}``.

    Attributes:
        standards_tree: vnd, prs or x.
        subtype: API subtype (e.g. "acme").
        version: Requested API version (e.g. "v1").
        format: Requested response format (e.g. "json").
    """

    standards_tree: str
    subtype: str
    version: str
    format: str

    @property
    def media_type(self) -> str:
        """Canonical media type for this negotiation."""
        return f"application/{self.standards_tree}.{self.subtype}.{self.version}+{self.format}"
