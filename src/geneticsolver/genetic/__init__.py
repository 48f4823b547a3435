from .gene import Gene
from .individual import Individual, SingleVariableIndividual, TwoVariableIndividual
from .population import Population
from .evolution import Evolution, ProgressRecord, RunResult, select_survivors, recombine
from .problems import Problem, PROBLEMS, get_problem, run_problem, run_single_variable, run_two_variable
from .minimizers import minimize, minimize_linear, minimize_sinusoidal, minimize_linear_bitflip, MINIMIZERS

__all__ = [
    'Gene',
    'Individual',
    'SingleVariableIndividual',
    'TwoVariableIndividual',
    'Population',
    'Evolution',
    'ProgressRecord',
    'RunResult',
    'select_survivors',
    'recombine',
    'Problem',
    'PROBLEMS',
    'get_problem',
    'run_problem',
    'run_single_variable',
    'run_two_variable',
    'minimize',
    'minimize_linear',
    'minimize_sinusoidal',
    'minimize_linear_bitflip',
    'MINIMIZERS',
]
