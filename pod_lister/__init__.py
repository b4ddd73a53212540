"""
Pod Lister - Kubernetes Workload Pod Existence Poller

A Python application that locates a workload by kind and name, then
periodically lists the pods in its namespace and re-checks that each
one still exists.
"""

__version__ = "1.0.0"
__author__ = "Pod Lister Team"
