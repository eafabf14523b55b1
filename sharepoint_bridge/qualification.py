"""
Qualification parsing
=====================

A qualification is a filter template supplied by the bridge caller. Values
are bound through placeholders following the bridge family convention::

    $filter=Title eq '<%= parameter["Title"] %>'

Each placeholder is replaced by the encoded value of the named parameter.
Encoding is left to subclasses; the SharePoint parser passes values through
untouched because the whole fragment is URL encoded later on.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Mapping

from sharepoint_bridge.exceptions import QueryParseError

logger = logging.getLogger(__name__)

PARAMETER_PATTERN = re.compile(r'<%=\s*parameter\["(.*?)"\]\s*%>')
_PLACEHOLDER_START = "<%="


class QualificationParser(ABC):
    """Substitutes parameter placeholders in a qualification template."""

    def parse(
        self, template: str | None, parameters: Mapping[str, str] | None
    ) -> str | None:
        if template is None:
            return None
        parameters = parameters or {}

        parts: list[str] = []
        position = 0
        for match in PARAMETER_PATTERN.finditer(template):
            parts.append(self._check_literal(template[position : match.start()]))
            name = match.group(1)
            if name not in parameters:
                raise QueryParseError(
                    f"Unable to parse qualification, the '{name}' parameter "
                    "was referenced but not provided.",
                    parameter=name,
                )
            parts.append(self.encode_parameter(name, parameters[name]))
            position = match.end()
        parts.append(self._check_literal(template[position:]))

        query = "".join(parts)
        logger.debug(f"Parsed qualification [{template}] into [{query}]")
        return query

    @staticmethod
    def _check_literal(text: str) -> str:
        # Anything that opens a placeholder here failed to match the pattern
        if _PLACEHOLDER_START in text:
            raise QueryParseError(
                "Unable to parse qualification, malformed parameter reference "
                f"near '{text[text.index(_PLACEHOLDER_START):]}'"
            )
        return text

    @abstractmethod
    def encode_parameter(self, name: str, value: str) -> str:
        """Return the representation of ``value`` used inside the query."""


class SharePointQualificationParser(QualificationParser):
    def encode_parameter(self, name: str, value: str) -> str:
        return value
