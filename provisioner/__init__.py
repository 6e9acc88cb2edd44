# provisioner/__init__.py
"""Windows service provisioning: venv creation plus NSSM registration."""

__version__ = "1.0.0"
