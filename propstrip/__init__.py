"""
propstrip: remove prop-types imports, requires and static prop assignments
from JavaScript/TypeScript sources.

Keep this file minimal; only re-export what callers need.
"""

__version__ = "1.0.0"

from .errors import CompatibilityError, ConfigurationError, ParseError, PropStripError  # noqa: F401
from .plugin import StripPropTypes, TransformResult, strip_prop_types  # noqa: F401

__all__ = [
    "StripPropTypes",
    "TransformResult",
    "strip_prop_types",
    "PropStripError",
    "ConfigurationError",
    "CompatibilityError",
    "ParseError",
    "__version__",
]
