"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner
from Bio import SeqIO

from genbank_parser import __version__
from genbank_parser.cli import main


class TestCLI:
    """Test cases for the genbank-parser command."""

    @pytest.fixture
    def runner(self):
        """Create a Click test runner."""
        return CliRunner()

    @pytest.fixture
    def bad_file(self, tmp_path, minimal_record_text, second_record_text):
        """A file whose first record is malformed."""
        path = tmp_path / "mixed.gb"
        path.write_text(minimal_record_text.replace("FEATURES", "FEATURE5") + second_record_text)
        return path

    def test_json_output_file(self, runner, genbank_file, tmp_path):
        output = tmp_path / "records.json"

        result = runner.invoke(main, [str(genbank_file), '-o', str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert [r['accession'] for r in data['records']] == ["AB123456", "X56734"]
        assert "Wrote 2 records" in result.output

    def test_json_to_stdout(self, runner, genbank_file):
        result = runner.invoke(main, [str(genbank_file), '--quiet'])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['metadata']['total_records'] == 2

    def test_fasta_output(self, runner, genbank_file, tmp_path, full_sequence):
        output = tmp_path / "records.fasta"

        result = runner.invoke(main, [str(genbank_file), '--format', 'fasta', '-o', str(output)])

        assert result.exit_code == 0, result.output
        records = list(SeqIO.parse(str(output), 'fasta'))
        assert [r.id for r in records] == ["AB123456", "X56734"]
        assert str(records[0].seq) == full_sequence

    def test_tsv_output(self, runner, genbank_file, tmp_path):
        output = tmp_path / "records.tsv"

        result = runner.invoke(main, [str(genbank_file), '--format', 'tsv', '-o', str(output)])

        assert result.exit_code == 0, result.output
        lines = output.read_text().splitlines()
        assert len(lines) == 3
        assert lines[0].startswith("Accession\tVersion")
        assert lines[2].startswith("X56734\t")

    def test_multiple_files(self, runner, genbank_file, tmp_path, minimal_record_text):
        other = tmp_path / "other.gb"
        other.write_text(minimal_record_text)
        output = tmp_path / "records.json"

        result = runner.invoke(main, [str(genbank_file), str(other), '-o', str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert len(data['records']) == 3

    def test_parallel_workers(self, runner, genbank_file, tmp_path):
        output = tmp_path / "records.json"

        result = runner.invoke(main, [str(genbank_file), '--workers', '2', '-o', str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert [r['accession'] for r in data['records']] == ["AB123456", "X56734"]

    def test_no_raw(self, runner, genbank_file, tmp_path):
        output = tmp_path / "records.json"

        result = runner.invoke(main, [str(genbank_file), '--no-raw', '-o', str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert 'origin_raw' not in data['records'][0]

    def test_abort_on_error(self, runner, bad_file, tmp_path):
        output = tmp_path / "records.json"

        result = runner.invoke(main, [str(bad_file), '-o', str(output)])

        assert result.exit_code == 1
        assert "ERROR" in result.output
        assert "FEATURE5" in result.output
        assert not output.exists()

    def test_skip_on_error(self, runner, bad_file, tmp_path):
        output = tmp_path / "records.json"

        result = runner.invoke(main, [str(bad_file), '--on-error', 'skip', '-o', str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert [r['accession'] for r in data['records']] == ["X56734"]

    def test_log_on_error_with_report(self, runner, bad_file, tmp_path):
        output = tmp_path / "records.json"
        report = tmp_path / "errors.json"

        result = runner.invoke(main, [
            str(bad_file), '--on-error', 'log', '--error-report', str(report), '-o', str(output)
        ])

        assert result.exit_code == 0, result.output
        assert "1 record(s) failed to parse" in result.output
        data = json.loads(report.read_text())
        assert data['summary']['total_errors'] == 1
        assert data['detailed_errors'][0]['record_index'] == 1

    def test_quiet_mode_suppresses_status(self, runner, genbank_file, tmp_path):
        output = tmp_path / "records.json"

        result = runner.invoke(main, [str(genbank_file), '-q', '-o', str(output)])

        assert result.exit_code == 0
        assert "Wrote" not in result.output
        assert output.exists()

    def test_quiet_mode_shows_errors(self, runner, bad_file):
        result = runner.invoke(main, [str(bad_file), '--quiet'])

        assert result.exit_code == 1
        assert "ERROR" in result.output

    def test_quiet_and_verbose_conflict(self, runner, genbank_file):
        result = runner.invoke(main, [str(genbank_file), '--quiet', '--verbose'])

        assert result.exit_code == 1
        assert "Cannot use both --quiet and --verbose" in result.output

    def test_missing_input_file(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.gb")])

        assert result.exit_code != 0

    def test_no_files_shows_help(self, runner):
        result = runner.invoke(main, [])

        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ['--version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_generate_config(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ['--generate-config'])

            assert result.exit_code == 0
            assert "genbank_parser.config.example.json" in result.output
            with open("genbank_parser.config.example.json") as f:
                assert json.load(f)['processing']['on_error'] == "log"

    def test_config_file(self, runner, genbank_file, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({'output': {'format': 'tsv'}}))
        output = tmp_path / "records.out"

        result = runner.invoke(main, [str(genbank_file), '--config', str(config), '-o', str(output)])

        assert result.exit_code == 0, result.output
        assert output.read_text().startswith("Accession\t")

    def test_invalid_config_value(self, runner, genbank_file, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({'processing': {'on_error': 'ignore'}}))

        result = runner.invoke(main, [str(genbank_file), '--config', str(config)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_environment_override(self, runner, genbank_file, tmp_path):
        output = tmp_path / "records.csv"

        result = runner.invoke(
            main, [str(genbank_file), '-o', str(output)],
            env={'GENBANK_PARSER_FORMAT': 'csv'}
        )

        assert result.exit_code == 0, result.output
        assert output.read_text().startswith("Accession,Version")

    def test_log_dir(self, runner, genbank_file, tmp_path):
        log_dir = tmp_path / "logs"

        result = runner.invoke(main, [
            str(genbank_file), '--log-dir', str(log_dir), '-o', str(tmp_path / "r.json")
        ])

        assert result.exit_code == 0, result.output
        assert list(log_dir.glob("genbank_parser_*.log"))
