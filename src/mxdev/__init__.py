"""
Mexico regional development analysis.

Composite development scores, rankings, PCA and k-means clustering
over the 32 Mexican federal entities.
"""

__version__ = "0.1.0"
