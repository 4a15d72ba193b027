"""Client domain service."""

from typing import Optional

from nexus.database.base import Collection, Store
from nexus.domain.entities import Client
from nexus.domain.errors import NotFoundError, record_not_found


class ClientService:
    """Service for listing and removing clients."""

    def __init__(self, store: Store):
        """Initialize client service.

        Args:
            store: Store instance
        """
        self.store = store

    def list_clients(self, search: Optional[str] = None) -> list[Client]:
        """List clients, newest first.

        Args:
            search: Optional case-insensitive filter on name, tax id or email

        Returns:
            List of client entities
        """
        clients = self.store.get_all(Collection.CLIENTS)
        if search:
            needle = search.lower()
            clients = [
                client
                for client in clients
                if needle in client.name.lower()
                or needle in client.tax_id.lower()
                or needle in client.email.lower()
            ]
        return sorted(clients, key=lambda client: client.created_at, reverse=True)

    def get_client(self, client_id: str) -> Optional[Client]:
        return self.store.get(Collection.CLIENTS, client_id)

    def delete_client(self, client_id: str) -> None:
        """Delete a client.

        Raises:
            NotFoundError: If the client doesn't exist
        """
        if self.store.get(Collection.CLIENTS, client_id) is None:
            raise NotFoundError(record_not_found(Collection.CLIENTS.value, client_id))
        self.store.delete(Collection.CLIENTS, client_id)
