import json
import logging
import os
from fnmatch import fnmatch

"""
Config files for get_client.

A config file is a JSON (or, with PyYAML installed, YAML) mapping of
section name -> section.  Connection keys in a section are prefixed
with ``nextcloud_``:

    {
        "default": {"nextcloud_url": "https://cloud.example.com",
                    "nextcloud_user": "alice",
                    "nextcloud_pass": "secret"},
        "work": {"inherits": "default", "nextcloud_user": "bob"},
        "all": {"contains": ["default", "work_*"]}
    }

``inherits`` pulls in the keys of another section, ``contains`` makes a
meta section standing for a list of sections (glob patterns allowed)
and ``disable`` hides a section from the expansion.
"""

log = logging.getLogger(__name__)

CONFIG_KEY_PREFIX = "nextcloud_"

## short forms accepted in config files
KEY_ALIASES = {"user": "username", "pass": "password"}


def _is_glob(name):
    return not set(name).isdisjoint("[*?")


def _enabled(config, name):
    return not config[name].get("disable", False)


def expand_config_section(config, section="default", blacklist=None):
    """
    The list of real sections a section name stands for.  Normally that's
    just ``[section]``, but the name may be ``*`` (every enabled
    section), a glob pattern or a meta section with ``contains``.
    Meta sections may contain each other, loops are cut.
    """
    if section == "*":
        return [x for x in config if _enabled(config, x)]

    if _is_glob(section):
        names = [x for x in config if fnmatch(x, section)]
    elif section not in config:
        return []
    elif "contains" in config[section]:
        blacklist = set(blacklist or ()) | {section}
        names = [x for x in config[section]["contains"] if x not in blacklist]
    else:
        return [section] if _enabled(config, section) else []

    results = []
    for name in names:
        if _is_glob(name) and name in config:
            ## a section literally named like a pattern, don't recurse
            expanded = [name]
        else:
            expanded = expand_config_section(config, name, blacklist)
        results.extend(x for x in expanded if x not in results)
    return results


def config_section(config, section="default"):
    """The section, with the keys of the section it ``inherits`` from below it"""
    if section not in config:
        return {}
    parent = config[section].get("inherits")
    ret = config_section(config, parent) if parent else {}
    ret.update(config[section])
    return ret


def connection_params(section):
    """
    The ``nextcloud_`` keys of a config section, as keyword arguments
    for get_client.  Empty values are skipped.
    """
    conn_params = {}
    for k, v in section.items():
        if not k.startswith(CONFIG_KEY_PREFIX) or not v:
            continue
        key = k[len(CONFIG_KEY_PREFIX) :]
        conn_params[KEY_ALIASES.get(key, key)] = v
    return conn_params


def default_locations():
    cfgdir = os.path.join(os.environ.get("HOME", "/"), ".config", "nckit")
    return [
        os.path.join(cfgdir, "nextcloud.conf"),
        os.path.join(cfgdir, "nextcloud.yaml"),
        os.path.join(cfgdir, "nextcloud.json"),
        "/etc/nckit/nextcloud.conf",
    ]


def _parse(fn, data):
    try:
        return json.loads(data)
    except ValueError:
        pass

    ## Late import, yaml is an optional dependency
    try:
        import yaml
    except ImportError:
        log.error(
            "config file %s exists but is not valid json, and pyyaml is not installed.",
            fn,
        )
        return {}
    try:
        return yaml.safe_load(data)
    except yaml.YAMLError:
        log.error(
            "config file %s exists but is neither valid json nor yaml.  Check the syntax.",
            fn,
        )
        return {}


def read_config(fn):
    """
    Reads a config file.  Without a file name the default locations are
    tried, and None is returned if none of them has a config.  A missing
    or broken file gives an empty dict.
    """
    if not fn:
        for candidate in default_locations():
            cfg = read_config(candidate)
            if cfg:
                return cfg
        return None

    try:
        with open(fn, "rb") as config_file:
            data = config_file.read()
    except FileNotFoundError:
        log.info("no config file found at %s", fn)
        return {}

    cfg = _parse(fn, data)
    if not isinstance(cfg, dict):
        log.error("config file %s should hold a mapping of sections, ignored", fn)
        return {}
    return cfg
