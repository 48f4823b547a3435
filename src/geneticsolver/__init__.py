from .config import GAConfig, InvalidConfiguration, MutationStrategy
from .genetic import *
from .genetic import __all__ as genetic_all

__all__ = ['GAConfig', 'InvalidConfiguration', 'MutationStrategy']
__all__.extend(genetic_all)
