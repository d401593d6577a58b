"""Environment management for Pocket Lisp variable and procedure scoping."""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from plisp.plisp_value import PLispValue


GLOBAL_LOCATION = "<global>"


@dataclass(eq=False)
class PLispEnvironment:
    """
    Mutable scope record with lexical scoping.

    Environments form a tree rooted at the global environment.  Every call
    environment's parent is the environment captured by the closure being
    called, never the caller's.  Environments are shared by reference: any
    number of closures may hold the same one and all of them see its updates.

    `location` labels the environment in stack traces.
    """
    parent: 'PLispEnvironment | None' = None
    location: str = GLOBAL_LOCATION
    bindings: Dict[str, PLispValue] = field(default_factory=dict)

    def define(self, name: str, value: PLispValue) -> None:
        """
        Bind a name in this environment, replacing any existing binding.

        Args:
            name: Binding name
            value: Value to bind
        """
        self.bindings[name] = value

    def add_bindings(self, bindings: Mapping[str, PLispValue]) -> None:
        """Insert or overwrite several bindings in this environment."""
        self.bindings.update(bindings)

    def lookup(self, name: str) -> PLispValue | None:
        """
        Look up a name in this environment or its ancestors.

        Args:
            name: Binding name to look up

        Returns:
            The bound value, or None if no environment in the chain binds it
        """
        env: PLispEnvironment | None = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]

            env = env.parent

        return None

    def has_binding(self, name: str) -> bool:
        """Check if a name is bound in this environment or its ancestors."""
        return self.lookup(name) is not None

    def stack_trace(self) -> List[str]:
        """
        Collect the locations from this environment up to the root.

        Returns:
            Locations, innermost first, ending with the global location
        """
        locations = []
        env: PLispEnvironment | None = self
        while env is not None:
            locations.append(env.location)
            env = env.parent

        return locations

    def __repr__(self) -> str:
        """String representation for debugging."""
        local_bindings = list(self.bindings.keys())
        parent_info = f" (parent: {self.parent.location})" if self.parent else ""
        return f"PLispEnvironment({self.location}: {local_bindings}{parent_info})"


def make_environment(parent: PLispEnvironment | None, location: str) -> PLispEnvironment:
    """
    Create an empty environment inheriting from `parent`.

    Args:
        parent: Enclosing environment, or None for a root
        location: Label shown for this environment in stack traces

    Returns:
        The new environment
    """
    return PLispEnvironment(parent=parent, location=location)


def root_environment(native_table: Mapping[str, PLispValue]) -> PLispEnvironment:
    """
    Create the global environment seeded with the host's native functions.

    Args:
        native_table: Mapping from name to native function value

    Returns:
        A parentless environment labelled "<global>"
    """
    env = make_environment(None, GLOBAL_LOCATION)
    env.add_bindings(native_table)
    return env
