"""Audit trail for pipeline runs.

Main Components
---------------
- RunContext: run lifecycle (stages, artifacts, errors)
- AuditLogger: JSONL event logger
- ManifestWriter: ``run.json`` builder
"""

from biblioinsights.audit.context import RunContext
from biblioinsights.audit.helpers import generate_run_id
from biblioinsights.audit.logger import AuditLogger
from biblioinsights.audit.manifest import ManifestWriter

__all__ = [
    "AuditLogger",
    "ManifestWriter",
    "RunContext",
    "generate_run_id",
]
