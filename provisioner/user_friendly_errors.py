# provisioner/user_friendly_errors.py

"""
Centralized dictionary for mapping technical exceptions to user-friendly messages.
"""

ERROR_MAP = {
    "InsufficientPrivilegesError": {
        "message": "Administrator privileges are required to register a Windows service.",
        "suggestion": "Re-run this command from an elevated (Run as administrator) terminal."
    },
    "DependencyMissing": {
        "message": "A required tool could not be found on PATH.",
        "suggestion": "Install the missing tool (Python from python.org, NSSM from nssm.cc) and make sure its folder is on PATH."
    },
    "InvalidProjectName": {
        "message": "The project name cannot be used as a folder or service name.",
        "suggestion": "Use a single name without slashes, colons or other path characters, e.g. 'billing-sync'."
    },
    "EnvironmentCreationFailed": {
        "message": "The virtual environment could not be created.",
        "suggestion": "Close any program using files inside the venv folder and check that the Python installation includes the venv module."
    },
    "DependencyInstallFailed": {
        "message": "Installing the packages listed in requirements.txt failed.",
        "suggestion": "Check requirements.txt for typos or unavailable versions and confirm the machine can reach the package index."
    },
    "ServiceInstallFailed": {
        "message": "The Windows service could not be installed or configured.",
        "suggestion": "Check that no other service uses this name and that NSSM runs from an elevated terminal."
    },
    "ServiceRemovalFailed": {
        "message": "The existing Windows service could not be removed.",
        "suggestion": "Stop the service manually (services.msc) and try again."
    },
    "ValidationError": {
        "message": "The provisioner configuration is invalid.",
        "suggestion": "Check the values in your .env file and environment variables."
    },
    "default": {
        "message": "An unexpected error occurred.",
        "suggestion": "Please check the log output above for more details."
    }
}


def describe_error(exc: BaseException) -> dict:
    """Looks up the friendly description for exc, walking its class hierarchy."""
    for cls in type(exc).__mro__:
        if cls.__name__ in ERROR_MAP:
            return ERROR_MAP[cls.__name__]
    return ERROR_MAP["default"]
