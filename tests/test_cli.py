"""Tests for the CLI entry point."""

import sqlite3

from click.testing import CliRunner

from telemetry_service.cli import main


class TestCliHelp:

    def test_help_exits_zero(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Collect telemetry reports" in result.output
        assert "--generate-schema" in result.output

    def test_invalid_log_level(self) -> None:
        result = CliRunner().invoke(main, ["--log-level", "loud"])
        assert result.exit_code != 0


class TestGenerateSchema:

    def test_creates_node_table_per_network(self, tmp_path) -> None:
        result = CliRunner().invoke(
            main, ["--database-url", f"sqlite+aiosqlite:///{tmp_path}", "--generate-schema"],
        )
        assert result.exit_code == 0, result.output

        for network in ("mainnet", "testnet"):
            conn = sqlite3.connect(tmp_path / network)
            try:
                columns = {row[1] for row in conn.execute("PRAGMA table_info(node)")}
            finally:
                conn.close()
            assert {"id", "last_seen", "chain_id", "protocol_version"} <= columns
