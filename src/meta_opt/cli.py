"""Console script for meta_opt."""

import typer
import yaml
from rich.console import Console
from rich.table import Table

from meta_opt.exceptions import ConfigurationError
from meta_opt.logging import setup_logger
from meta_opt.optimisation.config import ALGORITHM_CONFIGS, OptimizationConfigManager, default_config
from meta_opt.optimisation.runners import BatchRunner, MultiRunResult, OptimizationResult

app = typer.Typer(help="Population-based metaheuristics on benchmark objectives.")
console = Console()


def _load_config_manager(config: str | None, algorithm: str | None) -> OptimizationConfigManager:
    if config:
        config_manager = OptimizationConfigManager(config_path=config)
        if algorithm and algorithm.upper() != config_manager.get_algorithm_config().algorithm:
            raise typer.BadParameter("--algorithm conflicts with the algorithm in --config")
        return config_manager
    return OptimizationConfigManager.from_defaults(algorithm or "PSO")


def _result_table(result: OptimizationResult) -> Table:
    table = Table(title=f"{result.algorithm} result")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Best fitness", f"{result.best_fitness:.6f}")
    table.add_row("Best position", ", ".join(f"{x:.4f}" for x in result.best_position))
    table.add_row("Iterations", str(result.iterations_completed))
    table.add_row("Seed", str(result.seed))
    table.add_row("Converged", str(result.convergence_info.get("converged", False)))
    table.add_row("Time (s)", f"{result.optimization_time:.3f}")
    if result.error:
        table.add_row("Error", result.error, style="red")
    return table


def _multi_run_table(multi: MultiRunResult) -> Table:
    table = Table(title=f"{multi.best_result.algorithm} multi-run summary")
    table.add_column("Run", justify="right")
    table.add_column("Seed", justify="right")
    table.add_column("Best fitness", justify="right")
    table.add_column("Converged")
    for summary in multi.run_summaries:
        table.add_row(
            str(summary["run_id"]),
            str(summary["seed"]),
            f"{summary['fitness']:.6f}",
            "yes" if summary["converged"] else "no",
        )
    for failed in multi.failed_runs:
        table.add_row(str(failed["run_id"]), str(failed["seed"]), "failed", "-", style="red")

    stats = multi.statistical_summary
    table.caption = (
        f"mean {stats['fitness_mean']:.6f} ± {stats['fitness_std']:.6f}, "
        f"min {stats['fitness_min']:.6f}, median {stats['fitness_median']:.6f}"
    )
    return table


@app.command()
def run(
    config: str | None = typer.Option(None, "--config", "-c", help="YAML configuration file"),
    algorithm: str | None = typer.Option(None, "--algorithm", "-a",
                                         help="Algorithm to run with default parameters"),
    seed: int | None = typer.Option(None, "--seed", "-s", help="Seed of the (first) run"),
    runs: int | None = typer.Option(None, "--runs", "-n", help="Number of independent runs"),
    log_dir: str | None = typer.Option(None, "--log-dir", help="Also write logs to DIR/run.log"),
):
    """Run an optimisation headless and print the results."""
    try:
        config_manager = _load_config_manager(config, algorithm)
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1)

    monitoring = config_manager.get_monitoring_config()
    setup_logger("meta_opt", log_dir=log_dir, console_level=monitoring.log_level)

    runner = BatchRunner(config_manager)
    multi_run = config_manager.get_multi_run_config()

    if (runs is not None and runs > 1) or (runs is None and multi_run.enabled):
        try:
            multi = runner.optimize_multi_run(num_runs=runs, base_seed=seed)
        except RuntimeError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(code=1)
        console.print(_multi_run_table(multi))
        console.print(_result_table(multi.best_result))
    else:
        result = runner.optimize(seed)
        console.print(_result_table(result))
        if not result.succeeded:
            raise typer.Exit(code=1)


@app.command()
def defaults(algorithm: str = typer.Argument("PSO", help=f"One of {', '.join(ALGORITHM_CONFIGS)}")):
    """Print the default YAML configuration of an algorithm."""
    try:
        config = default_config(algorithm)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    console.print(yaml.safe_dump(config, sort_keys=False, default_flow_style=False), markup=False)


if __name__ == "__main__":
    app()
