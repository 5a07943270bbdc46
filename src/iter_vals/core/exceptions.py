"""Exceptions raised by iter_vals"""  # noqa: D415


class IterValsError(Exception):
    """Base exception for iter_vals errors"""  # noqa: D415


class ConfigurationError(IterValsError):
    """Raised when settings cannot be resolved or validated"""  # noqa: D415


class FragmentError(IterValsError, ValueError):
    """Raised when a fragment is constructed from unusable input"""  # noqa: D415


class ElementTypeError(IterValsError, TypeError):
    """Raised when an element does not match the declared element type"""  # noqa: D415
