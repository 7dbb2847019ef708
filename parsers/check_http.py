"""
check_http Plugin Output Parser

Parses the human-readable report of the Nagios ``check_http`` plugin, e.g.::

    HTTP OK: HTTP/1.1 200 OK - 108168 bytes in 0.070 second response time |time=...

and exposes a single context attribute:

- status: result of the check (OK|WARNING|CRITICAL)

Entity identity is not part of the plugin output; it comes from the request
metadata.
"""

import logging
import re
from enum import Enum

from models.entity_data import AttributeSet, ParsedEntityData
from models.request_context import RequestContext
from parsers.errors import MalformedPayload

logger = logging.getLogger(__name__)

STATUS_DELIMITER_RE = re.compile(r"[:-]")


class CheckStatus(str, Enum):
    """Normalized check result."""
    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class CheckHttpParser:
    """Parser for ``check_http`` plugin output."""

    name = "check_http"

    def parse_request(self, context: RequestContext) -> ParsedEntityData:
        """
        Select the report line out of the plugin output.

        The plugin may print error messages before its report, and output
        conventionally ends with a newline. A single line is taken as is;
        otherwise the report is the line before the final (blank) one.
        CRLF line endings are accepted; the selected line has no trailing carriage return.

        Raises:
            MalformedPayload: If the body is empty
        """
        if not context.body:
            raise MalformedPayload("Empty check_http output")

        lines = context.body.split("\n")
        line = lines[0] if len(lines) == 1 else lines[-2]
        line = line.rstrip("\r")

        logger.debug(
            f"check_http output parsed: tx_id={context.tx_id}, "
            f"lines={len(lines)}, selected={line[:80]!r}"
        )

        return ParsedEntityData(data=line)

    def get_context_attrs(self, entity_data: ParsedEntityData) -> AttributeSet:
        """Extract the check status, degrading anything unrecognized to CRITICAL."""
        return {"status": self.normalize_status(entity_data.data).value}

    @staticmethod
    def normalize_status(line: str) -> CheckStatus:
        token = STATUS_DELIMITER_RE.split(line, maxsplit=1)[0]
        token = token.replace("HTTP", "", 1).strip()

        if token in (CheckStatus.OK.value, CheckStatus.WARNING.value):
            return CheckStatus(token)
        return CheckStatus.CRITICAL


parser = CheckHttpParser()
