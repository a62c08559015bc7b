"""
Helpers for returning stored PDFs over HTTP.
"""
from urllib.parse import quote

from fastapi.responses import Response


def pdf_response(data: bytes, filename: str, inline: bool = False) -> Response:
    """
    Wrap PDF bytes in a response with the right Content-Disposition.

    ``inline`` lets the browser render the file; otherwise it is offered as
    a download. Non-ASCII names are sent RFC 5987 encoded.
    """
    disposition = "inline" if inline else "attachment"
    ascii_name = filename.encode("ascii", "ignore").decode() or "document.pdf"
    ascii_name = ascii_name.replace('"', "")
    header = f'{disposition}; filename="{ascii_name}"; filename*=UTF-8\'\'{quote(filename)}'
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": header},
    )


def share_url(base_url: str, token: str) -> str:
    """Frontend link a recipient opens to see a shared document."""
    return f"{base_url.rstrip('/')}/shared-pdf/{token}"
