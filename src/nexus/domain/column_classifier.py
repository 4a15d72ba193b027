"""Keyword-based classification of spreadsheet headers onto semantic fields.

Exported spreadsheets use inconsistent, accented and abbreviated headers in
Portuguese and English. A header matches a field when it *contains* any of
that field's keywords, so one header may feed several fields at once (for
example "cliente" is both a name and an entity keyword).
"""

from dataclasses import dataclass
from typing import Sequence

from nexus.domain.import_record import ImportRecord, SemanticField
from nexus.utils.text import normalize_header

FIELD_KEYWORDS: dict[SemanticField, tuple[str, ...]] = {
    SemanticField.NAME: ("nome", "name", "cliente", "razao social", "favorecido", "fornecedor"),
    SemanticField.TAX_ID: ("cpf", "cnpj", "documento", "tax id", "taxid", "tax_id"),
    SemanticField.EMAIL: ("email", "e-mail", "correio"),
    SemanticField.PHONE: ("telefone", "celular", "phone", "mobile", "fone", "whatsapp"),
    SemanticField.AMOUNT: (
        "valor",
        "value",
        "amount",
        "total",
        "preco",
        "price",
        "quantia",
        "montante",
        "debito",
        "credito",
        "debit",
        "credit",
    ),
    SemanticField.DESCRIPTION: (
        "descricao",
        "description",
        "historico",
        "memo",
        "detalhe",
        "details",
        "lancamento",
    ),
    SemanticField.DATE: ("data", "date", "vencimento", "emissao", "competencia"),
    SemanticField.CODE: ("codigo", "code", "cod"),
    SemanticField.ACCOUNT: ("conta", "account", "banco", "bank", "caixa"),
    SemanticField.CATEGORY: ("categoria", "category", "classificacao", "natureza", "plano de contas"),
    SemanticField.ENTITY: ("entidade", "entity", "empresa", "company", "unidade", "filial", "cliente"),
}

EXPENSE_KEYWORDS = ("saida", "debito", "despesa", "debit", "expense")
INCOME_KEYWORDS = ("entrada", "credito", "receita", "credit", "income")


@dataclass(frozen=True)
class HeaderClassification:
    """Semantic fields and polarity inferred from one header."""

    header: str
    fields: frozenset[SemanticField]
    force_income: bool = False
    force_expense: bool = False

    def __contains__(self, semantic_field: object) -> bool:
        return semantic_field in self.fields


def classify_header(header: str) -> HeaderClassification:
    """Classify a header by keyword containment.

    Args:
        header: Raw or already-normalized header text

    Returns:
        HeaderClassification with every matching field (possibly none)
    """
    normalized = normalize_header(header)
    fields = frozenset(
        semantic_field
        for semantic_field, keywords in FIELD_KEYWORDS.items()
        if any(keyword in normalized for keyword in keywords)
    )
    return HeaderClassification(
        header=header,
        fields=fields,
        force_income=any(keyword in normalized for keyword in INCOME_KEYWORDS),
        force_expense=any(keyword in normalized for keyword in EXPENSE_KEYWORDS),
    )


def classify_headers(headers: Sequence[str]) -> list[HeaderClassification]:
    """Classify every header of a table, preserving column order."""
    return [classify_header(header) for header in headers]


def build_record(
    row_number: int,
    headers: Sequence[str],
    values: Sequence[str],
    classifications: Sequence[HeaderClassification],
) -> ImportRecord:
    """Map one row onto both its raw headers and its semantic fields.

    Columns are applied left to right. A later column overwrites a semantic
    field only when it carries a non-empty value; a polarity column with a
    value flags the whole row.
    """
    record = ImportRecord(row_number=row_number)
    for index, header in enumerate(headers):
        value = values[index].strip() if index < len(values) and values[index] else ""
        record.values[header] = value
        if not value:
            continue

        classification = classifications[index]
        for semantic_field in classification.fields:
            record.fields[semantic_field] = value
        if classification.force_income:
            record.force_income = True
        if classification.force_expense:
            record.force_expense = True
    return record
