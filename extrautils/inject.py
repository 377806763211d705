"""
Trait injection.

Copies the behavioral surface of one class (static members, instance
members and default attributes) onto another class or onto a single
instance. Members are copied by reference into the destination's own
namespace; the destination's bases are left untouched.

Usage:

    class Patch(Legacy):
        def extra(self): ...
        def existing(self): ...

    inject(Patch, overwrite=True)          # patches Legacy itself
    inject(Patch, legacy_obj)              # patches one object only
"""

import types
from dataclasses import dataclass, field
from typing import Any

from .config import Config, get_default_config
from .exceptions import InjectionError
from .props import PropertyMap, apply
from .reflect import (
    ClassHandle,
    InstanceHandle,
    as_handle,
    attributes,
    instance_members,
    resolve_class,
    resolve_parent,
    static_members,
)


@dataclass
class InjectionReport:
    """Keys written by each injection step."""

    source: type
    destination: Any
    statics: list[str] = field(default_factory=list)
    members: list[str] = field(default_factory=list)
    attributes: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def written(self) -> list[str]:
        return self.statics + self.members + self.attributes


def _bindable(value: Any) -> bool:
    return isinstance(value, (types.FunctionType, staticmethod, classmethod))


class TraitInjector:
    """
    Copies statics, instance members and attributes between classes.

    Class destinations receive members exactly as they appear in the
    source's namespace. Instance destinations receive bound members as own
    attributes, shadowing the class versions for that one object.
    """

    def __init__(
        self,
        lg: Any | None = None,
        shared_attributes: bool = False,
        overwrite: bool = False,
    ) -> None:
        """
        Initialize the injector.

        Args:
            lg: Logger for injection progress (optional)
            shared_attributes: When the destination is an instance, write
                default attributes onto its class instead of the instance.
                This mutates state shared by every instance of that class.
            overwrite: Default overwrite policy for inject()
        """
        self._lg = lg
        self._shared_attributes = shared_attributes
        self._overwrite = overwrite

    @classmethod
    def from_config(
        cls, config: Config | None = None, lg: Any | None = None
    ) -> "TraitInjector":
        """
        Build an injector from the ``inject`` config section.

        Args:
            config: Configuration to read (the default configuration when omitted)
            lg: Logger for injection progress (optional)

        Returns:
            TraitInjector: Injector using inject.overwrite and inject.shared
        """
        if config is None:
            config = get_default_config()
        return cls(
            lg=lg,
            shared_attributes=config.inject.shared,
            overwrite=config.inject.overwrite,
        )

    def inject(
        self,
        source: Any,
        destination: Any | None = None,
        overwrite: bool | None = None,
    ) -> InjectionReport:
        """
        Copy the surface of source onto destination.

        Args:
            source: Class, instance or handle whose class provides the members
            destination: Class, instance or handle receiving them;
                defaults to the source class's parent
            overwrite: Replace members the destination already owns
                (the injector's default when None)

        Returns:
            InjectionReport: Keys written per step

        Raises:
            InjectionError: If the destination is built-in or read-only
            ConstructionError: If source cannot be built without arguments
        """
        if overwrite is None:
            overwrite = self._overwrite

        src = resolve_class(source)
        dest = as_handle(resolve_parent(src) if destination is None else destination)
        self._check_destination(dest)

        statics = static_members(src)
        members = instance_members(src)
        attrs = attributes(src)

        if isinstance(dest, ClassHandle):
            report = InjectionReport(source=src, destination=dest.cls)
            report.statics = apply(dest.cls, statics, overwrite, lg=self._lg)
            report.members = apply(dest.cls, members, overwrite, lg=self._lg)
            report.attributes = apply(dest.cls, attrs, overwrite, lg=self._lg)
        else:
            report = InjectionReport(source=src, destination=dest.obj)
            self._inject_instance(report, statics, members, attrs, overwrite)

        if self._lg:
            self._lg.debug(
                "traits injected",
                extra={
                    "source": src.__qualname__,
                    "destination": _label(report.destination),
                    "written": len(report.written),
                    "skipped": len(report.skipped),
                },
            )
        return report

    def _check_destination(self, dest: ClassHandle | InstanceHandle) -> None:
        cls = dest.cls if isinstance(dest, ClassHandle) else type(dest.obj)
        if cls.__module__ == "builtins":
            raise InjectionError(
                "refusing to patch a built-in type", destination=cls.__qualname__
            )

    def _bind(
        self, obj: Any, props: PropertyMap, report: InjectionReport
    ) -> PropertyMap:
        """Bind class-level members to obj so they work as own attributes."""
        bound = PropertyMap()
        for key, value in props.items():
            if _bindable(value):
                bound[key] = value.__get__(obj, type(obj))
            elif hasattr(type(value), "__get__") and not isinstance(value, type):
                report.skipped.append(key)
                if self._lg:
                    self._lg.debug(
                        "descriptor cannot be set on an instance",
                        extra={"key": key, "kind": type(value).__name__},
                    )
            else:
                bound[key] = value
        return bound

    def _inject_instance(
        self,
        report: InjectionReport,
        statics: PropertyMap,
        members: PropertyMap,
        attrs: PropertyMap,
        overwrite: bool,
    ) -> None:
        obj = report.destination
        statics = self._bind(obj, statics, report)
        members = self._bind(obj, members, report)
        report.statics = apply(obj, statics, overwrite, lg=self._lg)
        report.members = apply(obj, members, overwrite, lg=self._lg)

        attrs_target = type(obj) if self._shared_attributes else obj
        report.attributes = apply(attrs_target, attrs, overwrite, lg=self._lg)


def _label(dest: Any) -> str:
    if isinstance(dest, type):
        return dest.__qualname__
    return f"<{type(dest).__qualname__} instance>"


def inject(
    source: Any,
    destination: Any | None = None,
    overwrite: bool = False,
    lg: Any | None = None,
    shared_attributes: bool = False,
) -> InjectionReport:
    """
    Copy the surface of source onto destination (parent class by default).

    Convenience wrapper around TraitInjector.inject().

    Args:
        source: Class, instance or handle providing the members
        destination: Class, instance or handle receiving them
        overwrite: Replace members the destination already owns
        lg: Logger for injection progress (optional)
        shared_attributes: Write attributes onto an instance destination's class

    Returns:
        InjectionReport: Keys written per step
    """
    return TraitInjector(lg=lg, shared_attributes=shared_attributes).inject(
        source, destination, overwrite
    )
