"""Accept header parser for API content negotiation.

API clients select a version and response format with a vendor media type:

    Accept: application/{tree}.{subtype}[.{version}]+{format}

e.g. ``application/vnd.acme.v2+json``. The parts a header omits fall back to
the configured defaults.

Usage:
    parser = AcceptParser(standards_tree="vnd", subtype="acme", version="v1", format="json")
    parser.parse("application/vnd.acme.v2+json")
    # Accept(standards_tree="vnd", subtype="acme", version="v2", format="json")
"""

import re

from apikit.domain.value_objects.accept import Accept
from apikit.presentation.errors.exceptions import BadRequestHttpException


class AcceptParser:
    """Parse Accept headers against the configured standards tree and subtype.

    Args:
        standards_tree: vnd, prs or x.
        subtype: API subtype.
        version: Default version.
        format: Default response format.
    """

    def __init__(self, *, standards_tree: str, subtype: str, version: str, format: str) -> None:
        self.standards_tree = standards_tree
        self.subtype = subtype
        self.version = version
        self.format = format
        self._pattern = re.compile(
            rf"application/{re.escape(standards_tree)}\.{re.escape(subtype)}"
            r"(?:\.(?P<version>[\w\-]+(?:\.[\w\-]+)*))?\+(?P<format>\w+)",
            re.IGNORECASE,
        )

    def parse(self, header: str | None, *, strict: bool = False) -> Accept:
        """Parse an Accept header value.

        Args:
            header: Raw header value (may list several media types).
            strict: Reject headers that do not carry the API media type.

        Returns:
            Accept: Negotiated tree, subtype, version and format.

        Raises:
            BadRequestHttpException: In strict mode when the header does not match.
        """
        match = self._pattern.search(header or "")
        if match is None:
            if strict:
                raise BadRequestHttpException(
                    "Accept header could not be properly parsed because of a strict matching process."
                )
            return self.default()

        return Accept(
            standards_tree=self.standards_tree,
            subtype=self.subtype,
            version=match.group("version") or self.version,
            format=match.group("format").lower(),
        )

    def default(self) -> Accept:
        """Accept value implied by the configured defaults."""
        return Accept(
            standards_tree=self.standards_tree,
            subtype=self.subtype,
            version=self.version,
            format=self.format,
        )
