"""
Algorithm Constants

Iteration caps, tolerances and defaults shared by every analyzer so results
stay comparable across runs and implementations.
"""

#: PageRank damping factor.
PAGERANK_DAMPING: float = 0.85
PAGERANK_MAX_ITER: int = 100
PAGERANK_TOL: float = 1.0e-6

EIGENVECTOR_MAX_ITER: int = 500
EIGENVECTOR_TOL: float = 1.0e-6

#: Attenuation factor for the Katz fallback when eigenvector iteration fails.
KATZ_ALPHA: float = 0.01
KATZ_BETA: float = 1.0

HITS_MAX_ITER: int = 100
HITS_TOL: float = 1.0e-8

#: Size of each top-K list in Insights and of the triage subsets.
DEFAULT_TOP_K: int = 5

#: Upper bound on enumerated elementary cycles.
DEFAULT_CYCLE_LIMIT: int = 1000
