"""
Utility modules
"""

from .input_parser import InputParser
from .completion_log import write_completion_records, read_completion_records, calculate_wait
from .visualization import Visualizer

__all__ = ['InputParser', 'write_completion_records', 'read_completion_records', 'calculate_wait',
           'Visualizer']
