# Run script for a configured optimisation
# Run from repo root:  python3 scripts/run.py --config configs/config_basic.yaml
# Replace config_basic with your config name

import argparse
import logging
import shutil
import sys
from pathlib import Path

import yaml

# put src on path
project_root = Path(__file__).resolve().parent.parent
src = project_root / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from meta_opt.logging import setup_logger  # noqa: E402
from meta_opt.optimisation.config.config_manager import OptimizationConfigManager  # noqa: E402
from meta_opt.optimisation.runners.batch_runner import BatchRunner  # noqa: E402


def load_config(path: str) -> dict:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f)


def result_to_dict(res) -> dict:
    """Plain-YAML view of an OptimizationResult."""
    return {
        "algorithm": res.algorithm,
        "seed": res.seed,
        "best_fitness": float(res.best_fitness),
        "best_position": [float(x) for x in res.best_position],
        "iterations_completed": res.iterations_completed,
        "optimization_time": float(res.optimization_time),
        "converged": bool(res.convergence_info.get("converged", False)),
        "history": [float(v) for v in res.history],
        "best_solutions": [
            {
                "position": [float(x) for x in sol["position"]],
                "fitness": float(sol["fitness"]),
                "iteration_found": sol["iteration_found"],
            }
            for sol in res.best_solutions
        ],
        "error": res.error,
    }


def export_results(res, cfg: dict) -> None:
    logger = logging.getLogger("meta_opt.scripts.run")

    out_cfg = cfg.get("output", {})
    if not out_cfg.get("save_results", False):
        return

    out_dir = Path(out_cfg.get("results_dir", "output"))
    out_dir.mkdir(parents=True, exist_ok=True)

    if hasattr(res, "run_summaries"):
        payload = {
            "best_result": result_to_dict(res.best_result),
            "run_summaries": res.run_summaries,
            "failed_runs": res.failed_runs,
            "statistical_summary": res.statistical_summary,
        }
    else:
        payload = result_to_dict(res)

    out_file = out_dir / out_cfg.get("results_file", "results.yaml")
    with open(out_file, "w") as f:
        yaml.safe_dump(payload, f, sort_keys=False, default_flow_style=False)
    logger.info("💾 Results written to %s", out_file)


def main(config_path: str):
    # 1. Load config and set up logging
    cfg = load_config(config_path)
    log_cfg = cfg.get("logging", {})
    setup_logger(
        name="meta_opt",
        log_dir=log_cfg.get("log_dir"),
        log_file=log_cfg.get("log_file", "run.log"),
        console_level=log_cfg.get("console_level", "INFO"),
        file_level=log_cfg.get("file_level", "DEBUG"),
    )
    logger = logging.getLogger("meta_opt.scripts.run")
    logger.info("🚀 Starting optimization run")
    logger.info("📋 Config file:\n%s", yaml.dump(cfg, sort_keys=False, default_flow_style=False))

    # Save config to output directory (copy original file)
    out_cfg = cfg.get("output", {})
    if out_cfg.get("save_results", False):
        out_dir = Path(out_cfg.get("results_dir", "output"))
        out_dir.mkdir(parents=True, exist_ok=True)
        cfg_dest = out_dir / "config.yaml"
        shutil.copy2(config_path, cfg_dest)
        logger.info(f"💾 Saved config to {cfg_dest}")

    # 2. Run optimization
    cfg_manager = OptimizationConfigManager(config_dict=cfg)
    cfg_manager.print_summary()
    runner = BatchRunner(cfg_manager)

    if cfg_manager.get_multi_run_config().enabled:
        res = runner.optimize_multi_run()
    else:
        res = runner.optimize()

    # 3. Export results to file
    export_results(res, cfg)

    logger.info("✅ Optimization complete!")


if __name__ == "__main__":
    p = argparse.ArgumentParser(description="Run meta_opt from config")
    p.add_argument("--config", "-c", default="configs/config_basic.yaml", help="YAML config path")
    args = p.parse_args()
    main(args.config)
