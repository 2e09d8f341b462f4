"""
Integration tests for complete CLI workflows.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
import yaml
from click.testing import CliRunner

from lambda_memory_bench.cli_module import cli
from lambda_memory_bench.config_module import BASE_URL_ENV_VAR
from lambda_memory_bench.exceptions import ConfigurationError


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clear_base_url(monkeypatch):
    monkeypatch.delenv(BASE_URL_ENV_VAR, raising=False)


@pytest.mark.integration
class TestInitCommand:
    """Test sample configuration generation."""

    def test_init_json(self, runner, temp_dir):
        output = temp_dir / "bench.config.json"

        result = runner.invoke(cli, ["init", "-o", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data["base_url"].startswith("https://")
        assert [f["function_type"] for f in data["families"]] == ["basic", "computation"]

    def test_init_yaml(self, runner, temp_dir):
        output = temp_dir / "bench.config.yaml"

        result = runner.invoke(cli, ["init", "-o", str(output)])

        assert result.exit_code == 0
        assert yaml.safe_load(output.read_text())["pricing"]["default_cold_start_fraction"] == 0.1


@pytest.mark.integration
class TestRunCommand:
    """Test the benchmark run command."""

    @pytest.fixture
    def config_file(self, temp_dir):
        path = temp_dir / "bench.json"
        path.write_text(
            json.dumps(
                {
                    "base_url": "https://api.example.com/prod",
                    "families": [
                        {"function_type": "basic", "memory_sizes": [128, 512, 1024]},
                        {"function_type": "computation", "memory_sizes": [128, 1024]},
                    ],
                    "suite_delay_s": 0,
                    "output_dir": str(temp_dir / "results"),
                }
            )
        )
        return path

    def test_run_end_to_end(self, runner, config_file, sample_families, temp_dir):
        async def fake_collect(family, base_url):
            return sample_families[family.function_type]

        with patch("lambda_memory_bench.orchestrator_module.collect_tiers", side_effect=fake_collect):
            result = runner.invoke(cli, ["run", "-c", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "Results saved to:" in result.output
        assert "Recommended Memory Configurations" in result.output

        written = sorted(p.name for p in (temp_dir / "results").iterdir())
        assert len(written) == 2
        assert written[0].startswith("comprehensive-test-")
        assert written[1].startswith("summary-report-")

    def test_run_overrides(self, runner, config_file, sample_families, temp_dir):
        seen = []

        async def fake_collect(family, base_url):
            seen.append((family.function_type, base_url))
            return sample_families[family.function_type]

        with patch("lambda_memory_bench.orchestrator_module.collect_tiers", side_effect=fake_collect):
            result = runner.invoke(
                cli,
                [
                    "run",
                    "-c", str(config_file),
                    "--base-url", "https://override.example.com/dev",
                    "--families", "computation",
                    "--output-dir", str(temp_dir / "override"),
                    "--no-suite-delay",
                ],
            )

        assert result.exit_code == 0, result.output
        assert seen == [("computation", "https://override.example.com/dev")]
        assert (temp_dir / "override").is_dir()

    def test_run_without_base_url(self, runner):
        result = runner.invoke(cli, ["run", "--no-suite-delay"])

        assert result.exit_code == 1
        assert "Base URL is required" in result.output

    def test_run_benchmark_error(self, runner, config_file):
        with patch(
            "lambda_memory_bench.cli_module.BenchmarkOrchestrator.run_benchmark",
            new=AsyncMock(side_effect=ConfigurationError("Unknown workload family: streaming")),
        ):
            result = runner.invoke(cli, ["run", "-c", str(config_file), "--families", "streaming"])

        assert result.exit_code == 1
        assert "Unknown workload family" in result.output


@pytest.mark.integration
class TestReportCommand:
    """Test re-rendering saved results."""

    @pytest.fixture
    def results_file(self, sample_results, temp_dir):
        path = temp_dir / "comprehensive-test.json"
        path.write_text(json.dumps(sample_results.to_dict()))
        return path

    def test_text_report(self, runner, results_file):
        result = runner.invoke(cli, ["report", str(results_file)])

        assert result.exit_code == 0, result.output
        assert "Recommended Memory Configurations (Balanced):" in result.output

    def test_json_report(self, runner, results_file):
        result = runner.invoke(cli, ["report", str(results_file), "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["overview"]["total_functions_tested"] == 5
        assert data["recommendations"]["basic"]["memoryMB"] == 128

    def test_report_uses_pricing_from_config(self, runner, results_file, temp_dir):
        config_path = temp_dir / "bench.json"
        config_path.write_text(json.dumps({"pricing": {"blended_scenario_fractions": [0.3, 0.6]}}))

        result = runner.invoke(cli, ["report", str(results_file), "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        assert "30% cold" in result.output
        assert "60% cold" in result.output
        assert "5% cold" not in result.output

    def test_report_defaults_to_stock_pricing(self, runner, results_file):
        result = runner.invoke(cli, ["report", str(results_file)])

        assert result.exit_code == 0, result.output
        assert "5% cold" in result.output
        assert "50% cold" in result.output

    def test_invalid_results_file(self, runner, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text(json.dumps({"families": {}}))

        result = runner.invoke(cli, ["report", str(path)])

        assert result.exit_code == 1
        assert "Invalid results file" in result.output
