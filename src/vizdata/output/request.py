"""
Request options (tqx) parsing.

A data-source request carries its options as one string of
semicolon-separated key:value pairs, for example:

    out:csv;reqId:4;version:0.6

Recognized keys are out, version, reqId and responseHandler. Unknown keys
are ignored so that newer clients keep working.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from vizdata.exceptions import (
    RequestOptionsError,
    UnsupportedFormatError,
    UnsupportedVersionError,
)
from vizdata.output.renderers import PROTOCOL_VERSION, OutputFormat

logger = logging.getLogger(__name__)


class RequestOptions(BaseModel):
    """Parsed request options."""

    model_config = ConfigDict(frozen=True)

    out: OutputFormat = Field(OutputFormat.JSON, description="Requested output format")
    version: str = Field(PROTOCOL_VERSION, description="Protocol version")
    req_id: str = Field("0", description="Request id echoed in JSON responses")
    response_handler: str | None = Field(
        None,
        description="JS callback for JSON responses (None means the configured default)",
    )


def parse_request_options(tqx: str | None) -> RequestOptions:
    """
    Parse a tqx string.

    Raises:
        RequestOptionsError: A segment is not a single key:value pair.
        UnsupportedVersionError: version is not the supported protocol version.
        UnsupportedFormatError: out is not json, html, csv or tsv-excel.
    """
    values: dict[str, str] = {}
    for segment in (tqx or "").split(";"):
        if not segment:
            continue
        parts = segment.split(":")
        if len(parts) != 2:
            raise RequestOptionsError(f"Wrong tqx format: {segment!r}", segment)
        values[parts[0]] = parts[1]

    version = values.get("version", PROTOCOL_VERSION)
    if version != PROTOCOL_VERSION:
        raise UnsupportedVersionError(
            f"Unsupported protocol version {version!r}, expected {PROTOCOL_VERSION!r}",
            "version",
        )

    out = values.get("out", OutputFormat.JSON.value)
    try:
        out_format = OutputFormat(out)
    except ValueError:
        raise UnsupportedFormatError(f"'out' parameter '{out}' is not supported", "out") from None

    options = RequestOptions(
        out=out_format,
        version=version,
        req_id=values.get("reqId", "0"),
        response_handler=values.get("responseHandler"),
    )
    logger.debug("Parsed request options: %s", options)
    return options
