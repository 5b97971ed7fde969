from ragtime.clients.api_client import RagtimeApiClient

__all__ = ["RagtimeApiClient"]
