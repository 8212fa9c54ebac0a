"""Key extractor registry.

Each factory binds a field name (and, for headers, an auth scheme) into an
async extractor. Extractors hold no state, so one instance is safely shared
by every concurrent request.

All extractors treat an empty value exactly like an absent one, and none of
them inspect the key's content beyond what their source requires.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from python_multipart.exceptions import FormParserError
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from keygate.exceptions import MissingOrMalformedKeyError
from keygate.lookup import KeyLookup, KeySource

if TYPE_CHECKING:
    from collections.abc import Callable

    from starlette.requests import Request

    from keygate.protocols import KeyExtractor

__all__ = [
    "build_extractor",
    "key_from_cookie",
    "key_from_form",
    "key_from_header",
    "key_from_param",
    "key_from_query",
]


def key_from_header(header: str, auth_scheme: str | None = "Bearer") -> KeyExtractor:
    """Extract a key from a request header.

    With an auth scheme, the header must read ``"<scheme> <credential>"``
    and the credential is returned unchanged (no base64 or other decoding).
    Without a scheme, the raw header value is the key.

    Args:
        header: Header name (case-insensitive, as in HTTP).
        auth_scheme: Expected scheme prefix, or None/"" for raw values.
    """
    prefix = f"{auth_scheme} " if auth_scheme else ""

    async def extract(request: Request) -> str:
        value = request.headers.get(header, "")
        if not prefix:
            if not value:
                raise MissingOrMalformedKeyError(source="header", name=header)
            return value
        if len(value) > len(prefix) and value.startswith(prefix):
            return value[len(prefix) :]
        raise MissingOrMalformedKeyError(source="header", name=header)

    return extract


def key_from_query(param: str) -> KeyExtractor:
    """Extract a key from a query string parameter."""

    async def extract(request: Request) -> str:
        key = request.query_params.get(param, "")
        if not key:
            raise MissingOrMalformedKeyError(source="query", name=param)
        return key

    return extract


def key_from_form(field: str) -> KeyExtractor:
    """Extract a key from a url-encoded or multipart form field.

    The body is read and cached before parsing, so the downstream handler
    can read the same form again. A body that does not parse as the declared
    form type counts as a missing key. Uploaded files never count as a key.
    """

    async def extract(request: Request) -> str:
        await request.body()
        try:
            form = await request.form()
        except (HTTPException, MultiPartException, FormParserError) as exc:
            raise MissingOrMalformedKeyError(
                source="form",
                name=field,
                reason=str(getattr(exc, "detail", exc)),
            ) from exc
        key = form.get(field)
        if not isinstance(key, str) or not key:
            raise MissingOrMalformedKeyError(source="form", name=field)
        return key

    return extract


def key_from_param(param: str) -> KeyExtractor:
    """Extract a key from a URL path parameter.

    Path parameters exist only after routing, so this extractor needs the
    pipeline installed on the route (``Route(..., middleware=[...])``).
    """

    async def extract(request: Request) -> str:
        key = request.path_params.get(param, "")
        if not isinstance(key, str):
            key = str(key)
        if not key:
            raise MissingOrMalformedKeyError(source="param", name=param)
        return key

    return extract


def key_from_cookie(name: str) -> KeyExtractor:
    """Extract a key from a named cookie."""

    async def extract(request: Request) -> str:
        key = request.cookies.get(name, "")
        if not key:
            raise MissingOrMalformedKeyError(source="cookie", name=name)
        return key

    return extract


_FACTORIES: dict[KeySource, Callable[[str], KeyExtractor]] = {
    KeySource.QUERY: key_from_query,
    KeySource.FORM: key_from_form,
    KeySource.PARAM: key_from_param,
    KeySource.COOKIE: key_from_cookie,
}


def build_extractor(lookup: KeyLookup, auth_scheme: str | None = None) -> KeyExtractor:
    """Bind a parsed lookup to its extractor.

    Args:
        lookup: Parsed lookup directive.
        auth_scheme: Scheme prefix for header lookups; ignored otherwise.

    Returns:
        An async extractor for the lookup's source.
    """
    if lookup.source is KeySource.HEADER:
        return key_from_header(lookup.name, auth_scheme)
    return _FACTORIES[lookup.source](lookup.name)
