"""
This module contains the exceptions raised by the nym core.

Every failure in the install pipeline aborts the current step and surfaces
here; rendering them is left to the command layer.
"""


class NymException(Exception):
    """
    Base exception for all nym errors.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class HomeDirectoryUnavailable(NymException):
    """Raised when the user's home directory cannot be determined."""


class ConfigurationError(NymException):
    """Raised when the configuration file cannot be read or is invalid."""


class NetworkError(NymException):
    """Raised when a request to the remote catalog fails."""


class DownloadError(NetworkError):
    """Raised for any failure while fetching a release artifact."""


class EmptyArtifactError(DownloadError):
    """Raised when the downloaded artifact has zero length."""


class InvalidFormatError(DownloadError):
    """Raised when a zip artifact does not start with the zip signature."""


class FormatError(NymException):
    """Raised when the catalog response is not the expected JSON shape."""


class InstallationError(NymException):
    """Base class for failures while installing a downloaded archive."""


class UnsupportedFormatError(InstallationError):
    """Raised when the archive suffix is neither .tar.gz nor .zip."""


class ExtractionError(InstallationError):
    """Raised when reading, decompressing or writing an archive entry fails."""


class SwitchError(NymException):
    """Base class for failures while repointing the current link."""


class VersionNotInstalledError(SwitchError):
    """Raised when switching to a version that has no version directory."""


class LinkReplacementError(SwitchError):
    """Raised when the current link cannot be removed or recreated."""


class InsufficientPrivilegeError(SwitchError):
    """Raised when the platform refuses to create a symbolic link without elevation."""


class EnvironmentRegistrationError(NymException):
    """Raised when the bin directory cannot be persisted onto PATH."""
