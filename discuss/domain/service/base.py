"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Services are stateless between calls; everything they know about a
    comment comes from the repository at call time.
    """

    pass
