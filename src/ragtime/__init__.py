"""RagTime - document ingestion CLI and pipeline diagnostics"""

__version__ = "1.0.0"
