__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argweave'
__author__ = 'Argweave Developers'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

from .tokens import *
from .state import *
from .meta import *
from .faults import *
from .parsers import *
from .arguments import *
from .commands import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the token model
__all__ += tokens.__all__  # type: ignore[attr-defined]
# Load the exposed API of the consumption state
__all__ += state.__all__  # type: ignore[attr-defined]
# Load the exposed API of the grammar model
__all__ += meta.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the combinators
__all__ += parsers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the leaf builders
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
