"""
Note Graph Analysis

Graph-analytic measures (similarity, centrality, community detection, link
prediction and text-aware co-citations) over the link graph of a Markdown vault.
"""

__version__ = "1.0.0"
__author__ = "Note Graph Analysis Team"
