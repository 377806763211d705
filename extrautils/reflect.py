"""
Class introspection.

Resolves classes from classes or instances and splits a class's own
namespace into the views trait injection works with:

- static members: staticmethods, classmethods, nested classes and plain
  class variables
- instance members: descriptors used through instances (functions,
  properties, cached properties, ...)
- attributes: the own state of one default-constructed instance

Callers may pass raw values or the explicit ClassHandle / InstanceHandle
variants. Raw values are classified with `as_handle()`.
"""

from dataclasses import dataclass
from typing import Any

from .exceptions import ConstructionError, ReflectionError
from .props import PropertyMap, own_properties

# Interpreter-managed class metadata, never copied between classes
RESERVED_NAMES = frozenset(
    {
        "__module__",
        "__qualname__",
        "__name__",
        "__doc__",
        "__dict__",
        "__weakref__",
        "__slots__",
        "__annotations__",
        "__annotate__",
        "__annotate_func__",
        "__annotations_cache__",
        "__firstlineno__",
        "__static_attributes__",
        "__orig_bases__",
        "__parameters__",
        "__type_params__",
        "__abstractmethods__",
        "_abc_impl",
        "__dataclass_fields__",
        "__dataclass_params__",
        "__match_args__",
        "__init_subclass__",
    }
)

CONSTRUCTOR_NAMES = frozenset({"__init__", "__new__"})


@dataclass(frozen=True, eq=False)
class ClassHandle:
    """Explicit reference to a class."""

    cls: type

    def __post_init__(self) -> None:
        if not isinstance(self.cls, type):
            raise ReflectionError(
                "ClassHandle requires a class", got=type(self.cls).__name__
            )


@dataclass(frozen=True, eq=False)
class InstanceHandle:
    """Explicit reference to an instance."""

    obj: Any


Handle = ClassHandle | InstanceHandle


def as_handle(entity: Any) -> Handle:
    """
    Classify a value as a class or an instance.

    Args:
        entity: Raw value or an existing handle

    Returns:
        ClassHandle for classes, InstanceHandle for anything else
    """
    if isinstance(entity, (ClassHandle, InstanceHandle)):
        return entity
    if isinstance(entity, type):
        return ClassHandle(entity)
    return InstanceHandle(entity)


def resolve_class(entity: Any) -> type:
    """
    Get the class of entity, or entity itself when it already is a class.

    Args:
        entity: Class, instance or handle

    Returns:
        type: Resolved class
    """
    handle = as_handle(entity)
    if isinstance(handle, ClassHandle):
        return handle.cls
    return type(handle.obj)


def resolve_parent(entity: Any) -> type:
    """
    Get the immediate base of the resolved class.

    Args:
        entity: Class, instance or handle

    Returns:
        type: First base class (``object`` for classes without explicit bases)

    Raises:
        ReflectionError: If the resolved class is ``object``
    """
    cls = resolve_class(entity)
    if not cls.__bases__:
        raise ReflectionError("class has no parent", cls=cls.__qualname__)
    return cls.__bases__[0]


def _is_instance_member(value: Any) -> bool:
    """Check whether a class-dict entry is meant to be used through instances."""
    if isinstance(value, (staticmethod, classmethod, type)):
        return False
    return hasattr(type(value), "__get__")


def _class_namespace(entity: Any) -> PropertyMap:
    return own_properties(resolve_class(entity), RESERVED_NAMES | CONSTRUCTOR_NAMES)


def static_members(entity: Any) -> PropertyMap:
    """
    Get members owned by the class itself.

    Args:
        entity: Class, instance or handle

    Returns:
        PropertyMap: staticmethods, classmethods, nested classes, class variables
    """
    return PropertyMap(
        {
            k: v
            for k, v in _class_namespace(entity).items()
            if not _is_instance_member(v)
        }
    )


def instance_members(entity: Any) -> PropertyMap:
    """
    Get members the class provides to its instances, constructor excluded.

    Args:
        entity: Class, instance or handle

    Returns:
        PropertyMap: functions, properties and other descriptors
    """
    return PropertyMap(
        {k: v for k, v in _class_namespace(entity).items() if _is_instance_member(v)}
    )


def attributes(entity: Any) -> PropertyMap:
    """
    Get the own attributes of a default instance of the resolved class.

    The class is constructed once with no arguments. Construction failures
    are not recovered: they surface as ConstructionError.

    Args:
        entity: Class, instance or handle

    Returns:
        PropertyMap: Own attributes of the fresh instance

    Raises:
        ConstructionError: If the class cannot be built without arguments
    """
    cls = resolve_class(entity)
    try:
        instance = cls()
    except Exception as e:
        raise ConstructionError(
            "default construction failed", cls=cls.__qualname__
        ) from e
    return own_properties(instance)


class ClassDescriptor:
    """
    Read view over a class's injectable surface.

    Every property is recomputed on access; the descriptor keeps no copy of
    the class's state.
    """

    def __init__(self, entity: Any) -> None:
        self.cls = resolve_class(entity)

    @property
    def name(self) -> str:
        return self.cls.__qualname__

    @property
    def parent(self) -> type:
        return resolve_parent(self.cls)

    @property
    def static_members(self) -> PropertyMap:
        return static_members(self.cls)

    @property
    def instance_members(self) -> PropertyMap:
        return instance_members(self.cls)

    @property
    def attributes(self) -> PropertyMap:
        return attributes(self.cls)

    def __repr__(self) -> str:
        return f"ClassDescriptor({self.name})"


def describe(entity: Any) -> ClassDescriptor:
    """Build a ClassDescriptor for the class resolved from entity."""
    return ClassDescriptor(entity)
