"""
Errors raised by the roster store.
Routers translate them into HTTP responses.
"""


class RosterError(Exception):
    """Base class for roster store failures."""


class NotFound(RosterError):
    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} '{identifier}' not found")
        self.kind = kind
        self.identifier = identifier


class DuplicateEmail(RosterError):
    def __init__(self, email: str):
        super().__init__(f"Email '{email}' is already registered")
        self.email = email


class AccountPending(RosterError):
    def __init__(self, email: str):
        super().__init__("Account is pending approval by an administrator")
        self.email = email


class LastAdministrator(RosterError):
    def __init__(self):
        super().__init__("At least one administrator must remain")


class InvalidInput(RosterError):
    pass


class ExternalServiceError(RosterError):
    pass
