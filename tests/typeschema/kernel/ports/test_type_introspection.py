"""Tests for typeschema.kernel.ports.type_introspection module."""

from typeschema.adapters.python import PythonTypeIntrospector
from typeschema.kernel.ports import TypeIntrospector


class TestTypeIntrospectorProtocol:
    """Test which objects satisfy the introspection port."""

    def test_python_adapter(self) -> None:
        """Test the Python adapter implements the port."""
        assert isinstance(PythonTypeIntrospector(), TypeIntrospector)

    def test_partial_implementation(self) -> None:
        """Test an object missing port methods is not an introspector."""

        class MembersOnly:
            def list_members(self, type_):
                return []

        assert not isinstance(MembersOnly(), TypeIntrospector)
