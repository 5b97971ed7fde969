from abc import ABC, abstractmethod

from ragtime.models.analysis import SecondaryData


class SecondaryDataSource(ABC):
    """
    Source of the relational record and embedding statistics of a document.

    Implementations either query PostgreSQL directly or call the joint analysis
    endpoint; the analysis workflow depends only on this interface.
    """

    name: str = "secondary"
    # True when fetch() applies its own per-lookup timeouts
    bounds_lookups: bool = False

    @abstractmethod
    async def fetch(self, asset_id: str) -> SecondaryData:
        """
        Fetch relational and embedding sections for a document.

        Raises:
            RemoteUnavailableError: the backing endpoint is missing or unreachable.
        """
        pass
