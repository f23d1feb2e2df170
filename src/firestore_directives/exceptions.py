"""Exceptions raised while building or resolving directive-backed fields."""


class DirectiveError(Exception):
    """Base exception carrying an HTTP-equivalent status code."""

    def __init__(self, message: str = "Error occurred", code: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(DirectiveError):
    """Store provider missing, or a directive is declared with unusable arguments."""

    def __init__(self, message: str, code: int = 500):
        super().__init__(message, code)


class PathError(DirectiveError):
    """A store address could not be built from a path template."""

    pass


class UnresolvedReferenceError(PathError):
    """A path placeholder has no matching argument value."""

    def __init__(self, template: str, missing: list[str]):
        self.template = template
        self.missing = missing
        names = ", ".join(missing)
        super().__init__(f"Unresolved path placeholder(s) {names} in '{template}'")


class InvalidPathError(PathError):
    """An argument value cannot be used as a single path segment."""

    pass
