"""
N-gram QA over a knowledge base

Resolves short keyword questions ("birthplace bill gates wife") by matching
question n-grams against a surface-form dictionary and connecting the matched
entities through knowledge-base relations in a per-question candidate graph.
"""

__version__ = "0.1.0"
