"""Service registrations declared in META-INF/services and module-info."""

from .reader import read_module_provides, read_registered, read_service_file, services_file_path

__all__ = ["read_module_provides", "read_registered", "read_service_file", "services_file_path"]
