"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The file server only ever answers with two status codes:

    ┌────────┬──────────────────────────────────────────────────────────────┐
    │  200   │ OK         - The path resolved to content; body follows      │
    ├────────┼──────────────────────────────────────────────────────────────┤
    │  404   │ Not Found  - No content for the path, no route for the       │
    │        │              method, or a request line we could not parse    │
    └────────┴──────────────────────────────────────────────────────────────┘

Keeping the enum this small means an unsupported code fails loudly at the
point it is constructed:

    >>> HTTPStatus(500)
    Traceback (most recent call last):
    ...
    ValueError: 500 is not a valid HTTPStatus

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.
    
    Extends IntEnum, so members compare equal to plain integers:
    
        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """
    
    OK = 200            # Path resolved, content is the body
    NOT_FOUND = 404     # Everything else
    
    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.
        
        The reason phrase is the text after the code in the status line:
        
            HTTP/1.0 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
