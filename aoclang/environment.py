from typing import Any, Dict, Optional, Tuple


class Environment:
    """One scope in a chain of scopes mapping identifiers to values.

    A scope's parent is fixed when it is created; only its own bindings
    change afterwards. Closures hold a reference to the scope they were
    defined in, which keeps the whole chain above it alive.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        self.values[name] = value

    def lookup(self, name: str) -> Tuple[bool, Any]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return True, env.values[name]
            env = env.parent
        return False, None

    def assign(self, name: str, value: Any) -> bool:
        """Rebind `name` in the nearest scope that defines it.

        Assigning a name no scope defines does nothing and returns False.
        """
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                env.values[name] = value
                return True
            env = env.parent
        return False

