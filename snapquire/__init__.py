"""snapquire — defer top-level require() calls behind memoized accessors."""

from .api import construct, transform_file, transform_source  # noqa: F401
from .errors import (  # noqa: F401
    ModuleResolutionError,
    PreconditionViolation,
    SnapquireError,
    SourceParseError,
    UnsupportedConstructError,
)
from .lazify import Snapquirer  # noqa: F401
from .transform_types import TransformOptions, TransformStats  # noqa: F401
