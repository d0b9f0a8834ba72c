"""
Reconciler Module - Black Box Interface

Purpose: Resource lifecycle state machine
Interface: AppReconciler.create/read/update/delete/customize_diff(), TemplateReconciler.read()
Hidden: Argument building, process execution, outcome handling, logger labeling

The only module that mutates persisted resource attributes.
"""

from .app import AppReconciler
from .template import TemplateReconciler, sha256_sum

__all__ = ["AppReconciler", "TemplateReconciler", "sha256_sum"]
