# provisioner/tools/registry.py
from abc import ABC
from abc import abstractmethod

import structlog

log = structlog.get_logger(__name__)

ERROR_SERVICE_DOES_NOT_EXIST = 1060


class ServiceRegistry(ABC):
    """Answers whether the OS already knows a service by the given name."""

    @abstractmethod
    def exists(self, service_name: str) -> bool:
        raise NotImplementedError


class WindowsServiceRegistry(ServiceRegistry):
    """
    Queries the Service Control Manager through pywin32.

    pywin32 is imported on first use so the package stays importable on
    machines without it.
    """

    def exists(self, service_name: str) -> bool:
        import pywintypes
        import win32serviceutil

        try:
            win32serviceutil.QueryServiceStatus(service_name)
        except pywintypes.error as e:
            if e.winerror == ERROR_SERVICE_DOES_NOT_EXIST:
                return False
            raise
        log.debug("service_exists", service=service_name)
        return True
