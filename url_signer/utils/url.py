"""Query string helpers that leave untouched parameters byte-for-byte intact."""

from typing import Iterable, Mapping
from urllib.parse import quote_plus, unquote_plus


def _split(url: str) -> tuple[str, str | None, str | None]:
    """Split a URL into (base, query, fragment).

    The fragment is cut off first so a ``?`` inside it is never treated as the
    start of the query. ``query`` and ``fragment`` are None when absent.
    """
    fragment = None
    if "#" in url:
        url, fragment = url.split("#", 1)

    query = None
    if "?" in url:
        url, query = url.split("?", 1)

    return url, query, fragment


def _join(base: str, pairs: list[str], fragment: str | None) -> str:
    url = base
    if pairs:
        url += "?" + "&".join(pairs)
    if fragment is not None:
        url += "#" + fragment
    return url


def _raw_pairs(query: str | None) -> list[str]:
    if not query:
        return []
    return [pair for pair in query.split("&") if pair]


def _decode_pair(pair: str) -> tuple[str, str]:
    key, _, value = pair.partition("=")
    return unquote_plus(key), unquote_plus(value)


def _encode_pair(key: str, value: str) -> str:
    return f"{quote_plus(key)}={quote_plus(value)}"


def query_parameters(url: str) -> dict[str, str]:
    """Parse the query component of a URL.

    Parameters
    ----------
    url : str
        The URL to parse.

    Returns
    -------
    dict[str, str]
        Decoded parameters in order of first appearance. When a key is
        repeated, the last value wins. A key without ``=`` maps to ``""``.
    """
    _, query, _ = _split(url)

    params: dict[str, str] = {}
    for pair in _raw_pairs(query):
        key, value = _decode_pair(pair)
        params[key] = value
    return params


def add_query_parameters(url: str, params: Mapping[str, object]) -> str:
    """Set or overwrite query parameters on a URL.

    Parameters
    ----------
    url : str
        The URL to modify.
    params : Mapping[str, object]
        Parameters to set. Values are converted with ``str()``.

    Returns
    -------
    str
        The new URL. Existing parameters not named in ``params`` keep their
        raw encoding and position. An overwritten parameter stays where it
        first appeared and any later duplicates are dropped. New parameters
        are appended in mapping order.
    """
    base, query, fragment = _split(url)
    pending = {key: str(value) for key, value in params.items()}

    pairs = []
    written = set()
    for pair in _raw_pairs(query):
        key, _ = _decode_pair(pair)
        if key not in pending:
            pairs.append(pair)
        elif key not in written:
            pairs.append(_encode_pair(key, pending[key]))
            written.add(key)

    for key, value in pending.items():
        if key not in written:
            pairs.append(_encode_pair(key, value))

    return _join(base, pairs, fragment)


def without_parameters(url: str, names: Iterable[str]) -> str:
    """Remove every occurrence of the named query parameters from a URL.

    Parameters
    ----------
    url : str
        The URL to modify.
    names : Iterable[str]
        Decoded parameter names to remove.

    Returns
    -------
    str
        The URL with the remaining parameters untouched. No trailing ``?`` is
        left behind when the query becomes empty.
    """
    base, query, fragment = _split(url)
    excluded = set(names)

    pairs = [pair for pair in _raw_pairs(query) if _decode_pair(pair)[0] not in excluded]
    return _join(base, pairs, fragment)
