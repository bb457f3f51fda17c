"""
Tutorial examples for the modeling primer.
"""

from tutorial.examples import EXAMPLES, build_example

__all__ = ["EXAMPLES", "build_example"]
