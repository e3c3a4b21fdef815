"""
Size estimation: projection policy and the sampling estimator.
"""

from querysketch.estimator.estimator import SamplingSizeEstimator
from querysketch.estimator.policy import SizeProjectionPolicy, average_selectivity

__all__ = [
    "SamplingSizeEstimator",
    "SizeProjectionPolicy",
    "average_selectivity",
]
