"""
Output module - Separates rendering from the table model.

Provides multiple output formats:
- render_json: JS-literal JSON for the DataTable constructor
- render_js_code: JS statements building an equivalent DataTable
- render_csv / render_tsv_excel: delimited text
- render_html: an HTML table page
- render_json_response: JSON wrapped in the data-source response envelope

Usage:
    from vizdata.output import parse_request_options, render

    options = parse_request_options("out:csv;reqId:4")
    text = render(table, options.out, req_id=options.req_id)
"""

from vizdata.output.renderers import (
    PROTOCOL_VERSION,
    OutputFormat,
    render,
    render_csv,
    render_html,
    render_js_code,
    render_json,
    render_json_response,
    render_tsv_excel,
)
from vizdata.output.request import RequestOptions, parse_request_options

__all__ = [
    "PROTOCOL_VERSION",
    "OutputFormat",
    "render",
    "render_json",
    "render_js_code",
    "render_csv",
    "render_tsv_excel",
    "render_html",
    "render_json_response",
    "RequestOptions",
    "parse_request_options",
]
