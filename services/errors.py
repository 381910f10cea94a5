"""Errors raised by the service runtime."""


class ServiceConfigurationError(RuntimeError):
    """A registry file or one of its providers could not be loaded."""


class ServiceFactoryError(LookupError):
    """A generated factory could not be found or invoked.

    The failing step is always available as ``__cause__``.
    """
