"""
Builds SharePoint list query URLs.
"""

from urllib.parse import quote_plus

LISTS_ENDPOINT = "/_api/web/lists"

# SharePoint expects these literal in the query string
_LITERAL_SEQUENCES = (("%3D", "="), ("%26", "&"))


def encode_query(query: str) -> str:
    """Form-encode a filter fragment the way java.net.URLEncoder does."""
    return quote_plus(query, safe="*").replace("~", "%7E")


def build_query_url(server_url: str, query: str | None) -> str:
    """Return the list endpoint URL for ``server_url`` filtered by ``query``.

    The fragment is encoded as a whole, then every encoded ``=`` and ``&`` is
    turned back into its literal character. Everything else (spaces, quotes,
    parentheses, ``$``) stays encoded.
    """
    url = f"{server_url}{LISTS_ENDPOINT}?"
    if query is not None:
        url += encode_query(query)
    for encoded, literal in _LITERAL_SEQUENCES:
        url = url.replace(encoded, literal)
    return url
