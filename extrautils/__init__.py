from importlib.metadata import PackageNotFoundError, version

from .exceptions import (
    ConfigError,
    ConstructionError,
    ExtraUtilsError,
    InjectionError,
    ReflectionError,
    SerializationError,
    ValidationError,
)
from .inject import InjectionReport, TraitInjector, inject
from .props import PropertyMap, apply, has_own, map_values, merge, own_properties
from .reflect import (
    ClassDescriptor,
    ClassHandle,
    InstanceHandle,
    as_handle,
    attributes,
    describe,
    instance_members,
    resolve_class,
    resolve_parent,
    static_members,
)
from .watch import Tracer, is_watched, unwrap, watch

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("extrautils")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

# Explicit public API
__all__ = [
    # Version
    "__version__",
    # Property maps
    "PropertyMap",
    "merge",
    "apply",
    "has_own",
    "own_properties",
    "map_values",
    # Introspection
    "ClassHandle",
    "InstanceHandle",
    "ClassDescriptor",
    "as_handle",
    "resolve_class",
    "resolve_parent",
    "static_members",
    "instance_members",
    "attributes",
    "describe",
    # Injection
    "TraitInjector",
    "InjectionReport",
    "inject",
    # Tracing
    "Tracer",
    "watch",
    "unwrap",
    "is_watched",
    # Exceptions
    "ExtraUtilsError",
    "ReflectionError",
    "ConstructionError",
    "InjectionError",
    "SerializationError",
    "ConfigError",
    "ValidationError",
]
