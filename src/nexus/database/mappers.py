"""Mapper functions between domain entities and their stored forms.

The relational store converts to and from SQLAlchemy models; the local store
converts to and from JSON-compatible dicts. Keeping both here means the
domain entities never know how they are persisted.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from nexus.domain import entities as domain
from nexus.database.base import Collection, Record
from nexus.database.models import (
    Client as ORMClient,
    Transaction as ORMTransaction,
    StoredFile as ORMStoredFile,
)


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        name=orm_client.name,
        tax_id=orm_client.tax_id,
        phone=orm_client.phone,
        email=orm_client.email,
        created_at=orm_client.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        kind=domain.TransactionKind(orm_transaction.kind),
        description=orm_transaction.description,
        amount=Decimal(orm_transaction.amount),
        date=orm_transaction.date,
        entity=orm_transaction.entity,
        category=orm_transaction.category,
        account=orm_transaction.account,
        observation=orm_transaction.observation,
        client_id=orm_transaction.client_id,
        supplier=orm_transaction.supplier,
        attachment_ids=tuple(orm_transaction.attachment_ids or ()),
        code=orm_transaction.code,
    )


def stored_file_to_domain(orm_file: ORMStoredFile) -> domain.StoredFile:
    """Convert SQLAlchemy StoredFile model to domain StoredFile entity."""
    return domain.StoredFile(
        id=orm_file.id,
        name=orm_file.name,
        mime_class=domain.MimeClass(orm_file.mime_class),
        size_label=orm_file.size_label,
        date=orm_file.date,
        associated_client=orm_file.associated_client,
        associated_transaction_id=orm_file.associated_transaction_id,
    )


def client_to_orm(client: domain.Client) -> ORMClient:
    return ORMClient(
        id=client.id,
        name=client.name,
        tax_id=client.tax_id,
        phone=client.phone,
        email=client.email,
        created_at=client.created_at,
    )


def transaction_to_orm(transaction: domain.Transaction) -> ORMTransaction:
    return ORMTransaction(
        id=transaction.id,
        kind=transaction.kind.value,
        description=transaction.description,
        amount=transaction.amount,
        date=transaction.date,
        entity=transaction.entity,
        category=transaction.category,
        account=transaction.account,
        observation=transaction.observation,
        client_id=transaction.client_id,
        supplier=transaction.supplier,
        attachment_ids=list(transaction.attachment_ids),
        code=transaction.code,
    )


def stored_file_to_orm(stored_file: domain.StoredFile) -> ORMStoredFile:
    return ORMStoredFile(
        id=stored_file.id,
        name=stored_file.name,
        mime_class=stored_file.mime_class.value,
        size_label=stored_file.size_label,
        date=stored_file.date,
        associated_client=stored_file.associated_client,
        associated_transaction_id=stored_file.associated_transaction_id,
    )


ORM_MODELS = {
    Collection.CLIENTS: ORMClient,
    Collection.TRANSACTIONS: ORMTransaction,
    Collection.FILES: ORMStoredFile,
}

TO_ORM = {
    Collection.CLIENTS: client_to_orm,
    Collection.TRANSACTIONS: transaction_to_orm,
    Collection.FILES: stored_file_to_orm,
}

TO_DOMAIN = {
    Collection.CLIENTS: client_to_domain,
    Collection.TRANSACTIONS: transaction_to_domain,
    Collection.FILES: stored_file_to_domain,
}


# JSON documents for the local store


def record_to_dict(record: Record) -> dict[str, Any]:
    """Convert a domain record to a JSON-compatible dict."""
    if isinstance(record, domain.Client):
        return {
            "id": record.id,
            "name": record.name,
            "taxId": record.tax_id,
            "phone": record.phone,
            "email": record.email,
            "createdAt": record.created_at.isoformat(),
        }
    if isinstance(record, domain.Transaction):
        return {
            "id": record.id,
            "type": record.kind.value,
            "description": record.description,
            "amount": str(record.amount),
            "date": record.date.isoformat(),
            "entity": record.entity,
            "category": record.category,
            "account": record.account,
            "observation": record.observation,
            "clientId": record.client_id,
            "supplier": record.supplier,
            "attachmentIds": list(record.attachment_ids),
            "code": record.code,
        }
    return {
        "id": record.id,
        "name": record.name,
        "type": record.mime_class.value,
        "size": record.size_label,
        "date": record.date.isoformat(),
        "associatedClient": record.associated_client,
        "associatedTransactionId": record.associated_transaction_id,
    }


def dict_to_record(collection: Collection, data: dict[str, Any]) -> Record:
    """Convert a stored JSON dict back to a domain record."""
    if collection is Collection.CLIENTS:
        return domain.Client(
            id=data["id"],
            name=data.get("name", ""),
            tax_id=data.get("taxId", ""),
            phone=data.get("phone", ""),
            email=data.get("email", ""),
            created_at=datetime.fromisoformat(data["createdAt"]),
        )
    if collection is Collection.TRANSACTIONS:
        return domain.Transaction(
            id=data["id"],
            kind=domain.TransactionKind(data["type"]),
            description=data.get("description", ""),
            amount=Decimal(data["amount"]),
            date=date.fromisoformat(data["date"]),
            entity=data.get("entity", ""),
            category=data.get("category", ""),
            account=data.get("account"),
            observation=data.get("observation"),
            client_id=data.get("clientId"),
            supplier=data.get("supplier"),
            attachment_ids=tuple(data.get("attachmentIds") or ()),
            code=data.get("code"),
        )
    return domain.StoredFile(
        id=data["id"],
        name=data["name"],
        mime_class=domain.MimeClass(data.get("type", "other")),
        size_label=data.get("size", ""),
        date=datetime.fromisoformat(data["date"]),
        associated_client=data.get("associatedClient"),
        associated_transaction_id=data.get("associatedTransactionId"),
    )


def settings_to_dict(settings: domain.AppSettings) -> dict[str, Any]:
    return {
        "companyName": settings.company_name,
        "taxId": settings.tax_id,
        "entities": list(settings.entities),
        "categories": list(settings.categories),
        "banks": list(settings.banks),
    }


def dict_to_settings(data: dict[str, Any]) -> domain.AppSettings:
    return domain.AppSettings(
        company_name=data.get("companyName", ""),
        tax_id=data.get("taxId", ""),
        entities=tuple(data.get("entities") or ()),
        categories=tuple(data.get("categories") or ()),
        banks=tuple(data.get("banks") or ()),
    )
