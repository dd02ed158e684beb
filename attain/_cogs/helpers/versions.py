"""
Detecting the package's own version.

The codebase does not contain the version directly; it is taken from
the installed distribution's metadata once at startup when the code is loaded.
"""
from typing import Optional

version: Optional[str] = None

try:
    import importlib.metadata
except ImportError:
    pass
else:
    try:
        name, *_ = __name__.split('.')  # usually "attain", unless renamed/forked.
        version = importlib.metadata.version(name)
    except importlib.metadata.PackageNotFoundError:
        pass  # running from a source tree, not installed.
