# ABOUTME: Orchestration layer on top of extraction
# ABOUTME: Pipeline Stage 2: URLs and page numbers → typed results for the CLI

"""
Core Layer: Workflow orchestration

This layer handles:
- Choosing the pipeline for a URL (resource or thread)
- Remembering the identifier each URL resolved to
- Service APIs and public interfaces

Data Flow: extraction/ records → ScoutService → CLI output
"""

# Import the service directly to keep this package free of import cycles
# Use: from minebbs_scout.core.service import ScoutService
