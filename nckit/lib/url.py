import posixpath
from typing import Optional
from typing import Union
from urllib.parse import ParseResult
from urllib.parse import quote
from urllib.parse import unquote
from urllib.parse import urlparse

## Characters the server accepts unescaped in a path: the
## query-allowed set minus "+" (legacy space), "?" and "&" (query
## separators, must be added separately)
URL_SAFE_CHARACTERS = "!$'()*,-./:;=@_~"


class URL:
    """
    A url string, parsed on first use.  Attributes of the parse result
    (scheme, netloc, path, port, username ...) are readable on the URL
    itself.

    Three kinds of address go through here: the account base url
    ("https://cloud.example.com/nextcloud"), absolute paths below the
    host ("/nextcloud/remote.php/dav/files/alice/") and full urls of a
    resource.
    """

    def __init__(self, url: str) -> None:
        self.url_raw = url or ""
        self._parsed: Optional[ParseResult] = None

    @property
    def parsed(self) -> ParseResult:
        if self._parsed is None:
            self._parsed = urlparse(self.url_raw)
        return self._parsed

    def __getattr__(self, attr: str):
        ## only reached for names the instance doesn't have
        if attr.startswith("_") or "url_raw" not in vars(self):
            raise AttributeError(attr)
        return getattr(self.parsed, attr)

    def __str__(self) -> str:
        return self.url_raw

    def __repr__(self) -> str:
        return "URL(%r)" % self.url_raw

    def __eq__(self, other: object) -> bool:
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.url_raw)

    def host_name(self) -> Optional[str]:
        """
        scheme://host[:port] of this URL, without path, or None if either
        the scheme or the host is missing.
        """
        try:
            parsed = self.parsed
            port = parsed.port
        except ValueError:
            return None
        if not parsed.scheme or not parsed.hostname:
            return None
        hostname = parsed.hostname
        if ":" in hostname:
            hostname = "[%s]" % hostname
        if port is not None:
            return "%s://%s:%s" % (parsed.scheme, hostname, port)
        return "%s://%s" % (parsed.scheme, hostname)

    def join(self, path: str) -> "URL":
        """
        Append a path to this URL.  Absolute paths (starting with a
        slash) are appended as well, the base URL may carry a path of
        its own (i.e. a server installed under /nextcloud).
        """
        if not path:
            return self
        base = str(self).rstrip("/")
        return URL("%s/%s" % (base, str(path).lstrip("/")))


def make(url: Union[URL, str]) -> URL:
    return url if isinstance(url, URL) else URL(url)


def host_name(url: str) -> Optional[str]:
    return URL(url).host_name()


def url_encoded(url: str) -> str:
    return quote(url, safe=URL_SAFE_CHARACTERS)


def path_components(href: str) -> list:
    """Components of a path, the leading "/" included like a file system root."""
    components = [c for c in href.split("/") if c]
    if href.startswith("/"):
        components.insert(0, "/")
    return components


def deleting_last_path_component(path: str) -> str:
    if path == "/":
        return "/"
    return posixpath.dirname(path.rstrip("/"))


def last_path_component(path: str) -> str:
    if path == "/":
        return "/"
    return posixpath.basename(path.rstrip("/"))


def path_extension(file_name: str) -> str:
    return posixpath.splitext(file_name)[1][1:]


def deleting_path_extension(file_name: str) -> str:
    root, ext = posixpath.splitext(file_name)
    if ext == ".":
        return file_name
    return root


def percent_decoded(text: str) -> str:
    return unquote(text)
