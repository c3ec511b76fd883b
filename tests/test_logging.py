"""
Tests for the run logger setup.
"""

import logging

from meta_opt.logging import setup_logger
from meta_opt.optimisation.config import PSOConfig
from meta_opt.optimisation.runners import RunController


class TestSetupLogger:
    """Test handler installation and the run log file."""

    def test_console_only(self):
        logger = setup_logger("meta_opt_test.console", console_level="WARNING")

        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.WARNING

    def test_handlers_attached_once(self, tmp_path):
        first = setup_logger("meta_opt_test.once", log_dir=str(tmp_path))
        second = setup_logger("meta_opt_test.once", log_dir=str(tmp_path))

        assert first is second
        assert len(second.handlers) == 2

    def test_run_progress_written_to_file(self, tmp_path):
        # Handlers left by other tests (e.g. the CLI) would block the file handler
        for handler in list(logging.getLogger("meta_opt").handlers):
            logging.getLogger("meta_opt").removeHandler(handler)

        logger = setup_logger("meta_opt", log_dir=str(tmp_path / "logs"), console_level="ERROR")
        try:
            controller = RunController(step_delay=0.0, progress_frequency=2)
            controller.configure(PSOConfig(num_particles=4, dimensions=2, max_iterations=4))
            controller.run_to_completion(seed=0)
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

        text = (tmp_path / "logs" / "run.log").read_text(encoding="utf-8")
        assert "Started PSO run" in text
        assert "PSO iteration 2/4" in text
        assert "run completed after 4 iterations" in text

        print("✅ Run progress written to run.log")
