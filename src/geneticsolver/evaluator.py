import logging
import time
from inspect import signature
from typing import Annotated, Callable, get_origin, get_args

import click
import matplotlib.pyplot as plt
import numpy as np
import optuna

from geneticsolver.config import InvalidConfiguration, MutationStrategy
from geneticsolver.function_generators import objectives
from geneticsolver.genetic import MINIMIZERS, PROBLEMS, ProgressRecord, get_problem, run_problem
from geneticsolver.utils import Interval


def absolute_error(problem_name: str, best_value: float) -> float:
    _, f_opt = objectives.reference_minimum(get_problem(problem_name).objective)
    return abs(best_value - f_opt)


def multivariate_model_runner(minimizer: Callable, problem_name: str, seeds: list[int], **kwargs) -> tuple[float, float]:
    """
    Return a univariate metric for performance of the minimizer. In this case, we use the mean log of the absolute
    error against the scipy reference optimum, plus the mean time taken per run across the seeds.

    Kwargs are Optuna trial.suggest_* parameters.
    """
    fun, _ = objectives.get_objective(get_problem(problem_name).objective)
    _, f_opt = objectives.reference_minimum(get_problem(problem_name).objective)

    log_errors = []
    time_start = time.time()

    for seed in seeds:
        x_hat = minimizer(seed=seed, **kwargs)
        error = abs(fun(*x_hat) - f_opt)
        if error <= 1e-12:
            log_errors.append(-12)  # Avoid log-zero issues when very small numbers
        else:
            log_errors.append(np.log10(error))

    time_elapsed = (time.time() - time_start) / len(seeds)
    click.echo(f"Trial with params {kwargs} took {time_elapsed:.2f}s per run, mean log errors: {np.mean(log_errors):.3f}")

    return float(np.mean(log_errors)), time_elapsed


def univariate_model_runner(**kwargs):
    log_error, time_elapsed = multivariate_model_runner(**kwargs)
    return log_error + time_elapsed


def make_optuna_objective(minimizer_to_test: Callable, problem_name: str, seeds: list[int]) -> Callable:
    sig = signature(minimizer_to_test)

    # The term "trial" is magic used by Optuna
    def optuna_loss(trial):
        kwargs = {}
        for name, param in sig.parameters.items():
            if name == 'seed':
                continue
            anno = param.annotation
            if get_origin(anno) is Annotated:
                base_type, meta = get_args(anno)
                if isinstance(meta, Interval):
                    if base_type is int:
                        step = None if meta.log else (meta.step if meta.step is not None else 1)
                        kwargs[name] = trial.suggest_int(name, meta.low, meta.high, step=step, log=meta.log)
                    else:
                        if meta.log:
                            step = None
                        else:
                            step = meta.step if meta.step is not None else (meta.high - meta.low) / 100
                        kwargs[name] = trial.suggest_float(name, meta.low, meta.high, step=step, log=meta.log)
                else:
                    raise ValueError(f"Unsupported metadata for {name}: {meta}")
            else:
                kwargs[name] = param.default

        try:
            return univariate_model_runner(minimizer=minimizer_to_test, problem_name=problem_name,
                                           seeds=seeds, **kwargs)
        except InvalidConfiguration as e:
            # Some combinations cannot split the population evenly
            raise optuna.TrialPruned(str(e))

    return optuna_loss


def tune_problem(problem_name: str, n_trials: int = 20, n_seeds: int = 3, seed: int | None = None) -> dict:
    """
    Tune the genetic algorithm on one problem using Optuna.

    :param problem_name: Key of PROBLEMS.
    :param n_trials: Number of trials for tuning.
    :param n_seeds: Runs per trial.
    :return: The best parameters found by Optuna.
    """
    minimizer = MINIMIZERS[f"minimize_{problem_name}"]
    objective = make_optuna_objective(minimizer, problem_name, seeds=list(range(n_seeds)))
    sampler = optuna.samplers.TPESampler(seed=seed)
    study = optuna.create_study(direction="minimize", sampler=sampler)
    study.optimize(objective, n_trials=n_trials)
    return study.best_params


def benchmark_problems(problem_names: list[str] | None = None, n_seeds: int = 5,
                       save_path: str | None = None, show: bool = True) -> list[dict]:
    """
    Run each problem over several seeds and plot error against generations.

    Args:
        problem_names: Problems to run. If None, run all problems.
        n_seeds: Runs per problem, seeded 0..n_seeds-1.
        save_path: Path to save the plot
        show: Whether to display the plot
    """
    problem_names = problem_names or list(PROBLEMS)
    click.echo(f"Benchmarking {len(problem_names)} problems over {n_seeds} seeds...")
    click.echo("-" * 60)

    results = []
    for i, name in enumerate(problem_names):
        click.echo(f"[{i+1}/{len(problem_names)}] Running {name}...")
        for seed in range(n_seeds):
            time_start = time.time()
            result = run_problem(name, seed=seed)
            results.append({
                'name': name,
                'seed': seed,
                'error': absolute_error(name, result.best_value),
                'generations': result.generations,
                'converged': result.converged,
                'time_elapsed': time.time() - time_start,
            })

    if results:
        create_benchmark_plot(results, save_path=save_path, show=show)

        click.echo("BENCHMARK SUMMARY")
        for name in problem_names:
            rows = [r for r in results if r['name'] == name]
            click.echo(f"{name:20} | mean error: {np.mean([r['error'] for r in rows]):10.3g} "
                       f"| mean generations: {np.mean([r['generations'] for r in rows]):7.1f} "
                       f"| mean time: {np.mean([r['time_elapsed'] for r in rows]):6.2f}s")

    return results


def create_benchmark_plot(results, save_path: str | None = None, show: bool = True):
    """Create a scatter plot of error against generations, one series per problem."""
    fig = plt.figure(figsize=(12, 8))
    for name in dict.fromkeys(r['name'] for r in results):
        rows = [r for r in results if r['name'] == name]
        errors = [max(r['error'], 1e-12) for r in rows]
        plt.scatter([r['generations'] for r in rows], errors, s=100, alpha=0.7, label=name)

    plt.yscale('log')
    plt.xlabel('Generations')
    plt.ylabel('Absolute Error')
    plt.title('Genetic Algorithm Runs\n(Lower and Left is Better)')
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.tight_layout()
    if save_path is not None:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        click.echo(f"Plot saved as '{save_path}'")
    if show:
        plt.show()
    return fig


def plot_history(history: list[ProgressRecord], title: str = "", save_path: str | None = None, show: bool = True):
    """Plot best and mean result per generation."""
    generations = [r.generation for r in history]
    fig = plt.figure(figsize=(10, 6))
    plt.plot(generations, [r.best_value for r in history], label='best result')
    plt.plot(generations, [r.mean_value for r in history], '--', alpha=0.7, label='mean result')
    plt.xlabel('Generation')
    plt.ylabel('Result')
    plt.title(title or 'Convergence')
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.tight_layout()
    if save_path is not None:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        click.echo(f"Plot saved as '{save_path}'")
    if show:
        plt.show()
    return fig


@click.group()
@click.option('--verbose', is_flag=True, help='Log run events')
def cli(verbose):
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.option('--problem', type=click.Choice(list(PROBLEMS.keys())), default='linear', help='Which problem to solve')
@click.option('--population-size', type=int, default=None, help='Individuals per generation (problem default if unset)')
@click.option('--threshold', type=float, default=None, help='Convergence threshold (problem default if unset)')
@click.option('--patience', type=int, default=1, help='Consecutive converged generations required to stop')
@click.option('--max-generations', type=int, default=10_000, help='Generation cap')
@click.option('--mutation-strategy', type=click.Choice([s.value for s in MutationStrategy]), default=None,
              help='Mutation strategy (problem default if unset)')
@click.option('--seed', default=None, type=int, help='Random seed for reproducibility')
@click.option('--plot', 'plot_path', default=None, help='Path to save a convergence plot')
@click.option('--quiet', is_flag=True, help='Only print the final result')
def run(problem, population_size, threshold, patience, max_generations, mutation_strategy, seed, plot_path, quiet):
    """Run the genetic algorithm on one problem."""
    definition = PROBLEMS[problem]
    click.echo(f"Running for {definition.description}")

    def report(record: ProgressRecord):
        click.echo(f"generation: {record.generation}, best result is: {record.best_value}")

    try:
        evolution = definition.evolution(population_size=population_size, convergence_threshold=threshold,
                                   patience=patience, max_generations=max_generations,
                                   mutation_strategy=mutation_strategy, seed=seed)
    except InvalidConfiguration as e:
        raise click.UsageError(str(e))

    result = evolution.run(callback=None if quiet else report)
    genes = ", ".join(f"{name} = {value}" for name, value in zip("xy", result.best_genes))
    click.echo(f"ran for {result.generations} generations, with best result: {result.best_value}, when {genes}")
    if not result.converged:
        click.echo("warning: stopped at the generation cap before converging")

    if plot_path is not None:
        plot_history(result.history, title=definition.description, save_path=plot_path, show=False)


@cli.command()
def list_problems():
    """List all available problems."""
    click.echo("Available problems:")
    click.echo("-" * 40)
    for i, (name, definition) in enumerate(sorted(PROBLEMS.items()), 1):
        click.echo(f"{i:2d}. {name:20} {definition.description} (N={definition.population_size}, threshold={definition.threshold:g})")
    click.echo(f"\nTotal: {len(PROBLEMS)} problems")


@cli.command()
@click.option('--problem', type=click.Choice(list(PROBLEMS.keys())), default='linear', help='Which problem to tune on')
@click.option('--n-trials', default=20, help='Number of trials for hyperparameter tuning')
@click.option('--n-seeds', default=3, help='Runs per trial')
@click.option('--seed', default=None, type=int, help='Sampler seed for reproducibility')
def tune(problem, n_trials, n_seeds, seed):
    """Tune hyperparameters for a specific problem."""
    best_params = tune_problem(problem, n_trials=n_trials, n_seeds=n_seeds, seed=seed)

    click.echo(f"Best parameters found for {problem}:")
    for param, value in best_params.items():
        click.echo(f"  {param}: {value}")


@cli.command()
@click.option('--problems', multiple=True, type=click.Choice(list(PROBLEMS.keys())),
              help='Specific problems to run (can specify multiple times). If not specified, run all problems.')
@click.option('--n-seeds', default=5, help='Runs per problem')
@click.option('--save-path', default=None, help='Path to save the plot')
@click.option('--no-show', is_flag=True, help='Do not display the plot')
def benchmark(problems, n_seeds, save_path, no_show):
    """Benchmark problems over several seeds and create a scatter plot."""
    benchmark_problems(problem_names=list(problems) or None, n_seeds=n_seeds,
                       save_path=save_path, show=not no_show)


@cli.command()
@click.option('--name', type=click.Choice(list(objectives.OBJECTIVES.keys())), default='g', help='Objective to plot')
@click.option('--save-path', default=None, help='Path to save the plot')
@click.option('--no-show', is_flag=True, help='Do not display the plot')
def plot_function(name, save_path, no_show):
    """Plot an objective function and its reference optimum."""
    optimum, value = objectives.reference_minimum(name)
    click.echo(f"Reference optimum value: {value:.6g} at {optimum}")
    objectives.visualize_function(name, save_path=save_path, show=not no_show)


if __name__ == '__main__':
    cli()
