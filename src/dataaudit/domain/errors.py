"""Exceptions raised across the DataAudit layers."""


class NoAuditsLoadedError(RuntimeError):
    """A collection run was requested before any audits were loaded."""


class ProviderNotFoundError(LookupError):
    """No provider is registered under the requested identifier."""

    def __init__(self, provider_id: str):
        super().__init__(f"No database provider registered for '{provider_id}'")
        self.provider_id = provider_id


class ProviderError(RuntimeError):
    """A provider cannot perform the requested operation."""
