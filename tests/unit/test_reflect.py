"""
Tests for class introspection.

Tests key functionality including:
- Class and instance handles
- Class and parent resolution
- Static members, instance members and default attributes
- ClassDescriptor views
"""

import functools

import pytest

from extrautils.exceptions import ConstructionError, ReflectionError
from extrautils.reflect import (
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

# =============================================================================
# Helpers
# =============================================================================


class Animal:
    kind = "animal"

    def __init__(self):
        self.legs = 4
        self.name = "generic"

    def speak(self):
        return "..."


class Dog(Animal):
    """A dog."""

    sound = "woof"

    class Meta:
        pass

    def __init__(self):
        super().__init__()
        self.tricks = []

    def speak(self):
        return self.sound

    @staticmethod
    def create():
        return Dog()

    @classmethod
    def family(cls):
        return cls.__name__

    @property
    def loud(self):
        return self.sound.upper()

    @functools.cached_property
    def expensive(self):
        return 42


class NeedsArgs:
    def __init__(self, value):
        self.value = value


# =============================================================================
# Test Handles
# =============================================================================


@pytest.mark.unit
class TestHandles:
    """Test handle classification."""

    def test_class_becomes_class_handle(self):
        """Test classes are classified as ClassHandle."""
        handle = as_handle(Dog)

        assert isinstance(handle, ClassHandle)
        assert handle.cls is Dog

    def test_instance_becomes_instance_handle(self):
        """Test anything else is classified as InstanceHandle."""
        obj = Dog()
        handle = as_handle(obj)

        assert isinstance(handle, InstanceHandle)
        assert handle.obj is obj

    def test_existing_handle_passes_through(self):
        """Test handles are returned unchanged."""
        handle = InstanceHandle(Dog)

        assert as_handle(handle) is handle

    def test_class_handle_requires_class(self):
        """Test ClassHandle rejects non-classes."""
        with pytest.raises(ReflectionError):
            ClassHandle(Dog())

    def test_instance_handle_of_class_object(self):
        """Test a class wrapped as InstanceHandle resolves to its metaclass."""
        assert resolve_class(InstanceHandle(Dog)) is type


# =============================================================================
# Test Resolution
# =============================================================================


@pytest.mark.unit
class TestResolution:
    """Test class and parent resolution."""

    def test_resolve_class_of_class(self):
        """Test a class resolves to itself."""
        assert resolve_class(Dog) is Dog

    def test_resolve_class_of_instance(self):
        """Test an instance resolves to its class."""
        assert resolve_class(Dog()) is Dog

    def test_resolve_parent(self):
        """Test the immediate base is returned."""
        assert resolve_parent(Dog) is Animal
        assert resolve_parent(Dog()) is Animal

    def test_resolve_parent_of_root_class(self):
        """Test classes without explicit bases resolve to object."""
        assert resolve_parent(Animal) is object

    def test_resolve_parent_of_object(self):
        """Test object has no parent."""
        with pytest.raises(ReflectionError):
            resolve_parent(object)


# =============================================================================
# Test Member Views
# =============================================================================


@pytest.mark.unit
class TestStaticMembers:
    """Test static member extraction."""

    def test_contains_class_level_entries(self):
        """Test staticmethods, classmethods, nested classes and variables."""
        statics = static_members(Dog)

        assert isinstance(statics["create"], staticmethod)
        assert isinstance(statics["family"], classmethod)
        assert statics["Meta"] is Dog.Meta
        assert statics["sound"] == "woof"

    def test_excludes_metadata_and_constructor(self):
        """Test interpreter metadata and the constructor are left out."""
        statics = static_members(Dog)

        for name in ("__module__", "__qualname__", "__doc__", "__dict__", "__init__"):
            assert not statics.has(name)

    def test_excludes_inherited(self):
        """Test inherited class variables are not included."""
        assert not static_members(Dog).has("kind")

    def test_from_instance(self):
        """Test an instance resolves to its class's statics."""
        assert static_members(Dog()) == static_members(Dog)


@pytest.mark.unit
class TestInstanceMembers:
    """Test instance member extraction."""

    def test_contains_descriptors(self):
        """Test functions, properties and cached properties."""
        members = instance_members(Dog)

        assert set(members) == {"speak", "loud", "expensive"}

    def test_excludes_constructor(self):
        """Test __init__ is never an instance member."""
        assert not instance_members(Dog).has("__init__")

    def test_excludes_inherited(self):
        """Test inherited methods are not included."""

        class Puppy(Dog):
            pass

        assert len(instance_members(Puppy)) == 0


@pytest.mark.unit
class TestAttributes:
    """Test default attribute extraction."""

    def test_default_instance_attributes(self):
        """Test own attributes of a fresh instance."""
        attrs = attributes(Dog)

        assert attrs == {"legs": 4, "name": "generic", "tricks": []}

    def test_fresh_instance_each_call(self):
        """Test attributes come from a new instance, not a passed one."""
        obj = Dog()
        obj.legs = 3

        assert attributes(obj)["legs"] == 4

    def test_mutable_defaults_not_shared(self):
        """Test each call constructs a separate instance."""
        assert attributes(Dog)["tricks"] is not attributes(Dog)["tricks"]

    def test_construction_failure(self):
        """Test a constructor requiring arguments raises ConstructionError."""
        with pytest.raises(ConstructionError) as exc_info:
            attributes(NeedsArgs)

        assert isinstance(exc_info.value.__cause__, TypeError)
        assert exc_info.value.context["cls"] == "NeedsArgs"

    def test_construction_error_is_reflection_error(self):
        """Test ConstructionError can be caught as ReflectionError."""
        with pytest.raises(ReflectionError):
            attributes(NeedsArgs)


# =============================================================================
# Test ClassDescriptor
# =============================================================================


@pytest.mark.unit
class TestClassDescriptor:
    """Test ClassDescriptor views."""

    def test_views(self):
        """Test every view matches the module-level function."""
        desc = describe(Dog())

        assert isinstance(desc, ClassDescriptor)
        assert desc.name == "Dog"
        assert desc.parent is Animal
        assert desc.static_members == static_members(Dog)
        assert desc.instance_members == instance_members(Dog)
        assert desc.attributes == attributes(Dog)

    def test_views_are_live(self):
        """Test views reflect changes made after creation."""
        desc = describe(Dog)

        class Late:
            pass

        Dog.Late = Late
        try:
            assert desc.static_members["Late"] is Late
        finally:
            del Dog.Late

    def test_repr(self):
        """Test repr names the class."""
        assert repr(describe(Dog)) == "ClassDescriptor(Dog)"
