"""Document extraction through the generative-text service.

Two output shapes are requested from the model:

- strict JSON with ``clients`` and ``transactions`` lists, which goes
  through the repair engine and becomes ``ImportRecord`` rows;
- strict semicolon CSV with the fixed seven-column header, which is offered
  to the operator as a file and re-parsed locally for import.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from nexus.ai.client import AIMode, GenerationRequest, GenerativeClient
from nexus.domain.activity_log import ImportLog
from nexus.domain.entities import Polarity
from nexus.domain.errors import ParseError
from nexus.domain.import_record import ImportRecord, SemanticField
from nexus.domain.json_repair import RepairResult, repair_and_parse
from nexus.logger import get_logger
from nexus.utils.text import normalize_header

logger = get_logger(__name__)

CSV_COLUMNS = ("Código", "Conta", "Categoria", "Entidade", "Descrição", "Data", "Valor")
CSV_HEADER = ";".join(CSV_COLUMNS)

CLIENT_KEYS = {
    "name": SemanticField.NAME,
    "cpf": SemanticField.TAX_ID,
    "cnpj": SemanticField.TAX_ID,
    "taxId": SemanticField.TAX_ID,
    "tax_id": SemanticField.TAX_ID,
    "email": SemanticField.EMAIL,
    "mobile": SemanticField.PHONE,
    "phone": SemanticField.PHONE,
}

TRANSACTION_KEYS = {
    "date": SemanticField.DATE,
    "description": SemanticField.DESCRIPTION,
    "amount": SemanticField.AMOUNT,
    "account": SemanticField.ACCOUNT,
    "category": SemanticField.CATEGORY,
    "entity": SemanticField.ENTITY,
    "code": SemanticField.CODE,
    "counterparty": SemanticField.NAME,
}

_POLARITY_RULES = {
    Polarity.AUTO: (
        "Decide income or expense for each row from the document itself: "
        "debit/withdrawal/payment/negative sign means expense, "
        "credit/deposit/receipt means income."
    ),
    Polarity.FORCE_INCOME: "Every row is INCOME, regardless of signs or labels in the document.",
    Polarity.FORCE_EXPENSE: "Every row is an EXPENSE, regardless of signs or labels in the document.",
}


def build_extraction_prompt(polarity: Polarity, banks: Sequence[str] = ()) -> str:
    """Instruction for JSON extraction of clients and transactions."""
    known_banks = ", ".join(banks) if banks else "none configured"
    if polarity is Polarity.AUTO:
        type_rule = '"income" or "expense"'
    elif polarity is Polarity.FORCE_INCOME:
        type_rule = 'always "income"'
    else:
        type_rule = 'always "expense"'
    return f"""
EXTREME PRECISION DATA ENTRY.
Read the attached document line by line and extract EVERY client and EVERY
financial transaction it contains.

KNOWN BANK ACCOUNTS (for the "account" field): {known_banks}

MANDATORY OUTPUT (strict JSON, nothing else):
{{
  "clients": [{{"name": "...", "cpf": "...", "email": "...", "mobile": "..."}}],
  "transactions": [{{
    "date": "YYYY-MM-DD",
    "description": "...",
    "amount": 0.00,
    "type": {type_rule},
    "category": "...",
    "entity": "...",
    "account": "bank account name if it is one of the known accounts"
  }}]
}}

Rules:
1. Every row of every financial table is one transaction object.
2. {_POLARITY_RULES[polarity]}
3. If the header, footer or logo shows the document belongs to one of the
   known bank accounts, fill "account" with that exact name.
4. Do not summarize. Capture everything. If there are 500 rows, return 500 objects.
5. Dates in ISO format (YYYY-MM-DD). Amounts as plain numbers with a dot as
   decimal separator and no thousands separator.
6. Separate objects with commas. Use empty lists when nothing is found.
""".strip()


def build_csv_prompt(polarity: Polarity) -> str:
    """Instruction for conversion of a document into the seven-column CSV."""
    return f"""
Convert the attached financial document into CSV.

MANDATORY OUTPUT (CSV only, no commentary, no markdown):
- Delimiter: semicolon (;)
- First line exactly: {CSV_HEADER}
- Column order is fixed. Leave a value empty when it is unknown, but never
  drop or reorder a column.
- Data: DD/MM/YYYY
- Valor: comma as decimal separator, no thousands separator; expenses
  negative, income positive.

Rules:
1. One line per transaction row in the document.
2. {_POLARITY_RULES[polarity]}
3. Do not summarize. If there are 500 rows, return 500 lines.
4. Quote any value that contains a semicolon.
""".strip()


@dataclass
class ExtractionResult:
    """Records extracted from one document."""

    clients: list[ImportRecord] = field(default_factory=list)
    transactions: list[ImportRecord] = field(default_factory=list)
    repair: Optional[RepairResult] = None


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value).strip()


def _object_to_record(
    row_number: int, data: dict[str, Any], keys: dict[str, SemanticField]
) -> ImportRecord:
    record = ImportRecord(row_number=row_number)
    for key, raw_value in data.items():
        value = _to_text(raw_value)
        record.values[key] = value
        semantic_field = keys.get(key)
        if semantic_field is not None and value:
            record.fields[semantic_field] = value

    kind = _to_text(data.get("type")).lower()
    if kind.startswith(("inc", "rec", "cred")):
        record.force_income = True
    elif kind.startswith(("exp", "desp", "deb")):
        record.force_expense = True
    return record


def records_from_json(value: Any) -> tuple[list[ImportRecord], list[ImportRecord]]:
    """Split parsed model JSON into client and transaction records.

    A bare top-level list is read as a list of transactions.
    """
    if isinstance(value, list):
        raw_clients: Any = []
        raw_transactions: Any = value
    elif isinstance(value, dict):
        raw_clients = value.get("clients") or []
        raw_transactions = value.get("transactions") or []
    else:
        raise ParseError("Model JSON is neither an object nor a list")

    clients = [
        _object_to_record(index, item, CLIENT_KEYS)
        for index, item in enumerate(raw_clients if isinstance(raw_clients, list) else [], start=1)
        if isinstance(item, dict)
    ]
    transactions = [
        _object_to_record(index, item, TRANSACTION_KEYS)
        for index, item in enumerate(
            raw_transactions if isinstance(raw_transactions, list) else [], start=1
        )
        if isinstance(item, dict)
    ]
    return clients, transactions


def clean_csv_output(text: str) -> str:
    """Strip fences and prose around model CSV and make sure the header is there.

    Raises:
        ParseError: If the output has no semicolon-delimited lines
    """
    lines = [line.rstrip() for line in text.replace("```csv", "").replace("```", "").splitlines()]
    lines = [line for line in lines if line.strip()]

    header_prefix = normalize_header(CSV_COLUMNS[0]) + ";"
    for index, line in enumerate(lines):
        if normalize_header(line).startswith(header_prefix):
            data_lines = [row for row in lines[index + 1:] if ";" in row]
            return "\n".join([CSV_HEADER] + data_lines) + "\n"

    data_lines = [line for line in lines if ";" in line]
    if not data_lines:
        raise ParseError("AI response does not contain semicolon-delimited CSV")
    return "\n".join([CSV_HEADER] + data_lines) + "\n"


class ExtractionOrchestrator:
    """Builds prompts, calls the generative service and parses its output."""

    def __init__(self, client: GenerativeClient, log: ImportLog):
        """Initialize extraction orchestrator.

        Args:
            client: Generative-text client
            log: Activity log of the running import
        """
        self.client = client
        self.log = log

    def extract(
        self,
        document: bytes,
        media_type: str,
        filename: str,
        polarity: Polarity = Polarity.AUTO,
        banks: Sequence[str] = (),
    ) -> ExtractionResult:
        """Extract client and transaction records from a document.

        Raises:
            GenerativeServiceError: If the AI call fails
            ExtractionFailure: If the response cannot be repaired into JSON
        """
        self.log.info(f"Sending '{filename}' to the AI for extraction...")
        text = self.client.generate(
            GenerationRequest(
                prompt=build_extraction_prompt(polarity, banks),
                document=document,
                media_type=media_type,
                filename=filename,
                mode=AIMode.THINKING,
                force_json=True,
            )
        )
        logger.debug("Received %d characters of model output", len(text))

        repair = repair_and_parse(text)
        if repair.recovered:
            self.log.warning(
                f"AI output was malformed; recovered after {repair.attempts} repair attempt(s). "
                "Rows at the end of the document may be missing."
            )

        clients, transactions = records_from_json(repair.value)
        self.log.info(
            f"AI found {len(clients)} client(s) and {len(transactions)} transaction(s)"
        )
        return ExtractionResult(clients=clients, transactions=transactions, repair=repair)

    def convert_to_csv(
        self,
        document: bytes,
        media_type: str,
        filename: str,
        polarity: Polarity = Polarity.AUTO,
    ) -> str:
        """Convert a document into the fixed seven-column semicolon CSV.

        Raises:
            GenerativeServiceError: If the AI call fails
            ParseError: If the response holds no CSV
        """
        self.log.info(f"Sending '{filename}' to the AI for CSV conversion...")
        text = self.client.generate(
            GenerationRequest(
                prompt=build_csv_prompt(polarity),
                document=document,
                media_type=media_type,
                filename=filename,
                mode=AIMode.THINKING,
            )
        )
        return clean_csv_output(text)
