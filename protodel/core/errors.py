class PrototypeError(Exception):
    """
    Base exception for all prototype-model failures.
    """

    pass


class MethodNotFound(PrototypeError, AttributeError):
    """
    Raised when a capability cannot be resolved to a callable.
    """

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"{name} is not a method on this Instance")
        # AttributeError.__init__ resets name to None
        self.name = name


class ObserverError(PrototypeError):
    """
    Raised when an observer fails and the space is configured to propagate.
    """

    def __init__(self, observer_name: str, property_name: str) -> None:
        self.observer_name = observer_name
        self.property_name = property_name
        super().__init__(f"Observer {observer_name} failed while gating '{property_name}'")
