#!/usr/bin/env python
from dataclasses import dataclass
from dataclasses import field
from typing import Optional

from nckit import __version__
from nckit.lib import url
from nckit.typeidentifiers import TypeIdentifiers

DEFAULT_USER_AGENT = "python/nckit/" + __version__


@dataclass
class Session:
    """
    Identity of one account on one server.

    Everything that depends on who is talking to which server (request
    URLs, authentication, the files root of a listing, the registry of
    application provided type identifiers) is read from the session
    passed in, so several accounts can be used side by side.

    ``user`` is the login name, ``user_id`` the internal id the server
    uses in DAV paths.  They are usually identical.
    """

    url_base: str
    user: str
    user_id: str = ""
    password: str = ""
    account: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    dav: str = "remote.php/dav"
    nextcloud_version: int = 0
    type_identifiers: TypeIdentifiers = field(default_factory=TypeIdentifiers)

    def __post_init__(self) -> None:
        self.url_base = self.url_base.rstrip("/")
        if not self.user_id:
            self.user_id = self.user
        if not self.account:
            self.account = "%s %s" % (self.user, self.url_base)

    @property
    def host_name(self) -> Optional[str]:
        """scheme://host[:port] of url_base, None if it can't be derived"""
        return url.host_name(self.url_base)

    @property
    def files_root(self) -> str:
        """
        Path of the user's files collection, as the server spells it in
        hrefs.  A server installed below a path (https://host/nextcloud)
        puts that path in front.
        """
        prefix = url.make(self.url_base).path.rstrip("/")
        return "%s/%s/files/%s/" % (prefix, self.dav, self.user)

    @property
    def dav_url(self) -> str:
        return "%s/%s" % (self.url_base, self.dav)

    @property
    def files_url(self) -> str:
        return "%s/files/%s" % (self.dav_url, self.user_id)
