#!/usr/bin/env python
from typing import Dict
from typing import Optional

nsmap: Dict[str, str] = {
    "d": "DAV:",
    "oc": "http://owncloud.org/ns",
    "nc": "http://nextcloud.org/ns",
}

## The two sharing extensions both define a "share-permissions"
## property, in different namespaces.  Servers answer them with ad hoc
## prefixes (x1, x2), we only ever refer to them by namespace URI.
nsmap2: Dict[str, str] = nsmap.copy()
nsmap2["ocs"] = "http://open-collaboration-services.org/ns"
nsmap2["ocm"] = "http://open-cloud-mesh.org/ns"
nsmap2["s"] = "http://sabredav.org/ns"


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap2[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name
