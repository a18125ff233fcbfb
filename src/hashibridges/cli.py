"""
Command line interface.

Usage:
    hashi generate --width 10 --height 8 --islands 12 --output puzzle.bgs
    hashi solve puzzle.bgs --output solved.bgs --verbose
    hashi check puzzle.bgs --matrix
"""

import click

from . import config
from .core.errors import HashiError
from .core.persistence import load_puzzle, save_puzzle
from .core.utils import PuzzleConverter, calculate_solution_stats, setup_logger
from .core.validator import PuzzleValidator, StateEvaluator
from .generators.puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig
from .solvers.deductive_solver import DeductiveSolver, SolverConfig


@click.group()
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='YAML file overriding the default settings')
@click.pass_context
def hashi(ctx, config_path):
    """Generate, solve and check Hashiwokakero puzzles."""
    try:
        settings = config.load_settings(config_path)
    except ValueError as e:
        raise click.ClickException(str(e))
    ctx.obj = settings


@hashi.command()
@click.option('--width', '-w', type=int, help='Puzzle width (random if omitted)')
@click.option('--height', '-h', type=int, help='Puzzle height (random if omitted)')
@click.option('--islands', '-n', type=int, help='Number of islands (random if omitted)')
@click.option('--seed', type=int, help='Random seed')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Save the puzzle to a .bgs file')
@click.option('--with-solution', is_flag=True, help='Also print the solution the puzzle was built from')
@click.pass_obj
def generate(settings, width, height, islands, seed, output, with_solution):
    """Generate a solvable puzzle."""
    params = dict(settings['generator'], log_level=settings['logging']['level'])
    if seed is not None:
        params['random_seed'] = seed
    generator = PuzzleGenerator(PuzzleGeneratorConfig(**params))

    try:
        grid, solution = generator.generate_with_solution(width, height, islands)
    except HashiError as e:
        raise click.ClickException(str(e))

    click.echo(f"{grid.width}x{grid.height} puzzle with {grid.island_count} islands:")
    click.echo(str(grid))

    if with_solution:
        solved = grid.copy()
        for start, end, is_double in solution:
            solved.add_bridge_between(start, end, is_double)
        click.echo("\nSolution:")
        click.echo(str(solved))

    if output:
        try:
            save_puzzle(grid, output)
        except HashiError as e:
            raise click.ClickException(str(e))
        click.echo(f"\nPuzzle saved to {output}")


@hashi.command()
@click.argument('puzzle_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Save the resulting grid to a .bgs file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_obj
def solve(settings, puzzle_file, output, verbose):
    """Apply every forced bridge to a puzzle."""
    logger = setup_logger("PuzzleSolver", level="DEBUG" if verbose else settings['logging']['level'])
    try:
        grid = load_puzzle(puzzle_file)
    except HashiError as e:
        raise click.ClickException(f"Error loading puzzle: {e}")
    logger.info(f"Loaded {grid!r} from {puzzle_file}")

    solver_settings = settings['solver']
    solver = DeductiveSolver(grid, config=SolverConfig(
        time_limit=solver_settings['time_limit'],
        max_iterations=solver_settings['max_iterations'],
        verbose=verbose,
        log_level=settings['logging']['level']
    ))

    def progress_callback(moves_made, bridge, state):
        click.echo(f"{moves_made:3d}. {bridge}")

    solver.add_progress_callback(progress_callback)
    result = solver.solve()

    click.echo(str(grid))
    click.echo(f"State: {result.final_state.name} after {result.iterations} moves ({result.message})")

    if verbose:
        stats = calculate_solution_stats(grid)
        click.echo(f"Bridges: {stats['single_bridges']} single, {stats['double_bridges']} double, "
                   f"{stats['saturated_islands']}/{grid.island_count} islands saturated")

    if output:
        save_puzzle(grid, output)
        click.echo(f"Result saved to {output}")


@hashi.command()
@click.argument('puzzle_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--matrix', is_flag=True, help='Also print required counts and bridge units as arrays')
def check(puzzle_file, matrix):
    """Print the state and structural validation of a puzzle."""
    try:
        grid = load_puzzle(puzzle_file)
    except HashiError as e:
        raise click.ClickException(f"Error loading puzzle: {e}")

    state = StateEvaluator(grid).refresh()
    click.echo(f"State: {state.name}")

    validation = PuzzleValidator.validate_puzzle_structure(grid)
    click.echo(f"Structure: {'valid' if validation else 'invalid'}")
    for error in validation.errors:
        click.echo(f"  error: {error}")
    for warning in validation.warnings:
        click.echo(f"  warning: {warning}")

    if matrix:
        click.echo("Required:")
        click.echo(str(PuzzleConverter.to_grid(grid)))
        click.echo("Bridge units:")
        click.echo(str(PuzzleConverter.bridge_units(grid)))


def main():
    hashi()


if __name__ == '__main__':
    main()
