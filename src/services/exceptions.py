"""Shared exceptions for service layer operations."""


class LinkValidationError(Exception):
    """
    Raised when link input fails a pre-write invariant check.

    Covers missing url/title, URLs that do not parse as absolute http(s) URLs,
    and fields that exceed their configured maximum length.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class LinkNotFoundError(Exception):
    """
    Raised when no link with the given id is owned by the caller.

    A link owned by another user is reported the same way as a missing one.
    """

    def __init__(self, link_id: object = None) -> None:
        self.link_id = link_id
        super().__init__("Link not found")


class LinkConflictError(Exception):
    """Raised when the owner already has a link with the same URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__("This URL already exists in your bookmarks")


class EmailAlreadyExistsError(Exception):
    """Raised when signing up with an email that is already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("User already exists")


class InvalidCredentialsError(Exception):
    """Raised when signin email/password do not match a user."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")
