# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the provisioning-messaging CLI."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from provisioning.cli.main import cli


def _write_config(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "provisioning.yaml"
    path.write_text(body)
    return path


class TestCLI:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "check" in result.output
        assert "send" in result.output
        assert "consume" in result.output

    def test_check_memory_provider(self, tmp_path: Path):
        path = _write_config(tmp_path, "provisioning:\n  kafka:\n    provider: memory\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "check"])
        assert result.exit_code == 0, result.output
        assert "InMemoryBroker" in result.output
        assert "Configuration OK" in result.output

    def test_check_kafka_with_sasl(self, tmp_path: Path):
        path = _write_config(
            tmp_path,
            "provisioning:\n"
            "  kafka:\n"
            "    brokers: [kafka:9092]\n"
            "    sasl:\n"
            "      mechanism: scram-sha-512\n"
            "      username: svc\n"
            "      password: pw\n",
        )
        result = CliRunner().invoke(cli, ["--config", str(path), "check"])
        assert result.exit_code == 0, result.output
        assert "SASL_PLAINTEXT" in result.output
        assert "SCRAM-SHA-512" in result.output
        assert "kafka:9092" in result.output

    def test_check_reports_configuration_error(self, tmp_path: Path):
        path = _write_config(tmp_path, "provisioning:\n  kafka:\n    sasl:\n      mechanism: gssapi\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "check"])
        assert result.exit_code == 1
        assert "unknown SASL mechanism: gssapi" in result.output

    def test_send_with_memory_provider(self, tmp_path: Path):
        path = _write_config(tmp_path, "provisioning:\n  kafka:\n    provider: memory\n")
        result = CliRunner().invoke(
            cli,
            ["--config", str(path), "send", "orders", '{"id": 1}', "--key", "order-1", "--header", "source=cli"],
        )
        assert result.exit_code == 0, result.output
        assert "Sent" in result.output

    def test_send_rejects_malformed_header(self, tmp_path: Path):
        path = _write_config(tmp_path, "provisioning:\n  kafka:\n    provider: memory\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "send", "orders", "v", "--header", "nope"])
        assert result.exit_code == 2
        assert "name=value" in result.output

    def test_send_logs_carry_correlation_id(self, tmp_path: Path):
        path = _write_config(
            tmp_path,
            "provisioning:\n"
            "  kafka:\n"
            "    provider: memory\n"
            "  logging:\n"
            "    format: json\n"
            "    level:\n"
            "      root: DEBUG\n",
        )
        result = CliRunner().invoke(
            cli, ["--config", str(path), "--correlation-id", "corr-42", "send", "orders", "v"]
        )
        assert result.exit_code == 0, result.output
        assert '"event": "Sent messages"' in result.output
        assert '"correlation_id": "corr-42"' in result.output

    def test_unknown_log_level_is_configuration_error(self, tmp_path: Path):
        path = _write_config(tmp_path, "provisioning:\n  logging:\n    level:\n      root: loud\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "check"])
        assert result.exit_code == 1
        assert "unknown log level for root: loud" in result.output

    def test_malformed_timeout_is_configuration_error(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PROVISIONING_KAFKA_TIMEOUT", "abc")
        path = _write_config(tmp_path, "provisioning:\n  kafka:\n    brokers: [kafka:9092]\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "check"])
        assert result.exit_code == 1
        assert "invalid value for provisioning.kafka.timeout" in result.output
