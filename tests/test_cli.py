"""CLI tests."""

import pytest

from nexus.cli.main import cli
from nexus.domain.extraction import CSV_HEADER


@pytest.fixture
def data_dir(tmp_path, clean_env):
    return str(tmp_path / "data")


def invoke(cli_runner, data_dir, *args):
    return cli_runner.invoke(cli, ["--data-dir", data_dir, *args])


def test_import_clients_and_list(cli_runner, data_dir, fixtures_dir):
    result = invoke(cli_runner, data_dir, "import", str(fixtures_dir / "clientes.csv"), "--kind", "clients")

    assert result.exit_code == 0, result.output
    assert "Imported: 2" in result.output
    assert "Skipped: 0" in result.output

    result = invoke(cli_runner, data_dir, "client", "list")
    assert result.exit_code == 0
    assert "Ana Souza" in result.output
    assert "Bruno Lima" in result.output


def test_import_transactions_streams_log(cli_runner, data_dir, fixtures_dir):
    result = invoke(cli_runner, data_dir, "import", str(fixtures_dir / "extrato.csv"))

    assert result.exit_code == 0, result.output
    assert "[WARNING]" in result.output
    assert "Row 5" in result.output
    assert "Imported: 3" in result.output
    assert "New categories: Serviços" in result.output


def test_import_quiet(cli_runner, data_dir, fixtures_dir):
    result = invoke(cli_runner, data_dir, "import", str(fixtures_dir / "extrato.csv"), "-q")

    assert result.exit_code == 0
    assert "[WARNING]" not in result.output
    assert "Imported: 3" in result.output


def test_import_header_only_file_fails(cli_runner, data_dir, tmp_path):
    csv_path = tmp_path / "vazio.csv"
    csv_path.write_text("Nome;CPF\n", encoding="utf-8")

    result = invoke(cli_runner, data_dir, "import", str(csv_path), "--kind", "clients")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_import_windows_1252_file(cli_runner, data_dir, fixtures_dir):
    result = invoke(cli_runner, data_dir, "import", str(fixtures_dir / "extrato_cp1252.csv"), "-q")

    assert result.exit_code == 0
    assert "Imported: 2" in result.output


def test_import_undecodable_file_fails(cli_runner, data_dir, tmp_path, monkeypatch):
    monkeypatch.setattr("chardet.detect", lambda raw: {"encoding": None, "confidence": 0.0})
    csv_path = tmp_path / "extrato.csv"
    csv_path.write_bytes(b"Data;Descri\xe7\xe3o;Valor\n05/03/2024;Tarifa;12,90\n")

    result = invoke(cli_runner, data_dir, "import", str(csv_path))

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "[ERROR" in result.output


def test_transaction_list_and_delete(cli_runner, data_dir, fixtures_dir):
    invoke(cli_runner, data_dir, "import", str(fixtures_dir / "extrato.csv"), "-q")

    result = invoke(cli_runner, data_dir, "transaction", "list", "--type", "expense")
    assert result.exit_code == 0
    assert "Aluguel sala" in result.output
    assert "Pagamento cliente Ana" not in result.output
    assert "Expense: 1,512.90" in result.output

    result = invoke(cli_runner, data_dir, "transaction", "delete", "missing-id")
    assert result.exit_code == 1
    assert "missing-id" in result.output


def test_transaction_list_rejects_bad_date(cli_runner, data_dir):
    result = invoke(cli_runner, data_dir, "transaction", "list", "--start-date", "someday")

    assert result.exit_code == 1
    assert "Invalid start date" in result.output


def test_settings_commands(cli_runner, data_dir):
    result = invoke(cli_runner, data_dir, "settings", "add-category", "Impostos")
    assert result.exit_code == 0

    result = invoke(cli_runner, data_dir, "settings", "add-category", "Impostos")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = invoke(cli_runner, data_dir, "settings", "show")
    assert "Nexus Enterprise" in result.output
    assert "Impostos" in result.output


def test_files_add_and_list(cli_runner, data_dir, tmp_path):
    document = tmp_path / "contrato.pdf"
    document.write_bytes(b"%PDF-1.4")

    result = invoke(cli_runner, data_dir, "files", "add", str(document), "--client", "Ana Souza")
    assert result.exit_code == 0
    assert "pdf" in result.output

    result = invoke(cli_runner, data_dir, "files", "list")
    assert "contrato.pdf" in result.output
    assert "Ana Souza" in result.output


def test_export_to_stdout(cli_runner, data_dir, fixtures_dir):
    invoke(cli_runner, data_dir, "import", str(fixtures_dir / "clientes.csv"), "--kind", "clients", "-q")

    result = invoke(cli_runner, data_dir, "export", "clients", "-o", "-")

    assert result.exit_code == 0
    assert result.output.splitlines()[0].startswith('"id","name"')
    assert "Bruno Lima" in result.output


def test_export_to_file(cli_runner, data_dir, tmp_path):
    output = tmp_path / "movimentos.csv"

    result = invoke(cli_runner, data_dir, "export", "transactions", "-o", str(output))

    assert result.exit_code == 0
    assert output.read_text(encoding="utf-8").startswith('"id","type"')


def test_convert_command(cli_runner, data_dir, tmp_path, fake_ai, monkeypatch):
    client = fake_ai(f"{CSV_HEADER}\nA1;Nubank;Marketing;CMG;Anúncio;05/03/2024;-150,00\n")
    monkeypatch.setattr("nexus.domain.import_service.GenerativeClient", lambda: client)
    document = tmp_path / "fatura.pdf"
    document.write_bytes(b"%PDF-1.4")

    result = invoke(cli_runner, data_dir, "convert", str(document), "-q")

    assert result.exit_code == 0, result.output
    assert (tmp_path / "fatura.csv").exists()
    assert "Imported: 1" in result.output


def test_extract_without_api_key(cli_runner, data_dir, tmp_path):
    document = tmp_path / "extrato.pdf"
    document.write_bytes(b"%PDF-1.4")

    result = invoke(cli_runner, data_dir, "extract", str(document))

    assert result.exit_code == 1
    assert "OPENAI_API_KEY" in result.output


def test_relational_store_option(cli_runner, tmp_path, clean_env, fixtures_dir):
    db_url = f"sqlite:///{tmp_path / 'nexus.db'}"

    result = cli_runner.invoke(
        cli, ["--db-url", db_url, "import", str(fixtures_dir / "clientes.csv"), "--kind", "clients", "-q"]
    )
    assert result.exit_code == 0, result.output

    result = cli_runner.invoke(cli, ["--db-url", db_url, "client", "list"])
    assert "Ana Souza" in result.output
