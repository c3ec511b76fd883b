"""
Tests for the meta-opt console script.
"""

import yaml
from typer.testing import CliRunner

from meta_opt.cli import app
from meta_opt.optimisation.config import default_config

runner = CliRunner()


class TestDefaultsCommand:
    def test_prints_yaml(self):
        result = runner.invoke(app, ["defaults", "GWO"])

        assert result.exit_code == 0
        config = yaml.safe_load(result.output)
        assert config["optimization"]["algorithm"]["type"] == "GWO"
        assert config["optimization"]["algorithm"]["a"] == 2.0

    def test_unknown_algorithm(self):
        result = runner.invoke(app, ["defaults", "SA"])
        assert result.exit_code == 1


class TestRunCommand:
    def test_run_from_config_file(self, tmp_path):
        config = default_config("DE", population_size=6, dimensions=2, max_iterations=5)
        config["optimization"]["run"]["step_delay"] = 0.0
        config_file = tmp_path / "de.yaml"
        config_file.write_text(yaml.safe_dump(config))

        result = runner.invoke(app, ["run", "--config", str(config_file), "--seed", "3"])

        assert result.exit_code == 0, result.output
        assert "Best fitness" in result.output

        print("✅ CLI run from config file works")

    def test_multi_run_with_log_dir(self, tmp_path):
        config = default_config("PSO", num_particles=4, dimensions=2, max_iterations=3)
        config_file = tmp_path / "pso.yaml"
        config_file.write_text(yaml.safe_dump(config))

        result = runner.invoke(app, [
            "run", "--config", str(config_file), "--runs", "2", "--seed", "0",
            "--log-dir", str(tmp_path / "logs"),
        ])

        assert result.exit_code == 0, result.output
        assert "multi-run summary" in result.output

    def test_missing_config_file(self, tmp_path):
        result = runner.invoke(app, ["run", "--config", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1

    def test_conflicting_algorithm(self, tmp_path):
        config_file = tmp_path / "pso.yaml"
        config_file.write_text(yaml.safe_dump(default_config("PSO")))

        result = runner.invoke(app, ["run", "--config", str(config_file), "--algorithm", "GA"])
        assert result.exit_code != 0
