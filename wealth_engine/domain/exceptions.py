"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Input would make a calculation undefined (zero shares, negative price, unknown type)"""

    pass


class ParameterOutOfRangeError(DomainException):
    """Parameter is well-formed but outside the range the calculator supports"""

    pass
