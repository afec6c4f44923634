"""Microsoft authentication exceptions."""


class MicrosoftAuthError(Exception):
    """Base exception for Microsoft authentication errors."""

    pass


class CredentialsNotFoundError(MicrosoftAuthError):
    """Raised when required credential environment variables are not set."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            f"Missing OneDrive credentials: {', '.join(self.missing)}. "
            "Set them in the environment or in the onedrive-utils .env file."
        )
