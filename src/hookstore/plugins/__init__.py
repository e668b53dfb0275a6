"""Built-in plugins

Plugins are discovered via the ``hookstore.plugins`` entry point group, so
``engine.use("*", "json")`` and ``engine.use("*", json_codec)`` are
equivalent.

External packages add plugins by defining entry points:
    [project.entry-points."hookstore.plugins"]
    audit = "my_package.audit:audit_plugin"
"""

from .emit import emitter
from .encrypt import encrypter
from .expire import expire
from .json_codec import json_codec

BUILTIN_PLUGINS = {
    "json": json_codec,
    "encrypt": encrypter,
    "expire": expire,
    "emit": emitter,
}

__all__ = [
    "BUILTIN_PLUGINS",
    "emitter",
    "encrypter",
    "expire",
    "json_codec",
]
