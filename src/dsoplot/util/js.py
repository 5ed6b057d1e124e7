"""JavaScript payloads returned to the calling web page.

The page fetches the payload as a script and calls the function it defines:
`dsoStatus()` returns the instrument settings, `cs()` shows a message in the
status line (it is also what a failed plot degrades to).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dsoplot.types.records import StatusRecord

_TRAILING_EOL = re.compile(r"[\n\r]+$")


def sanitize(text: Any) -> str:
    """Make text safe to embed in a single-quoted JS string."""
    if text is None:
        return ""
    text = str(text).replace("'", "&#39;")
    return _TRAILING_EOL.sub("", text)


def message_js(text: str) -> str:
    return "function cs() { statMsg('%s'); }" % sanitize(text)


def _js_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return sanitize(value)


def status_js(record: StatusRecord) -> str:
    """Render a status record as the `dsoStatus()` function."""
    fields = ",\n".join(
        f"           {key}: '{_js_value(value)}'"
        for key, value in record.to_dict().items()
    )
    return "function dsoStatus() { \n  return { " + fields.lstrip() + "}\n};\n"
