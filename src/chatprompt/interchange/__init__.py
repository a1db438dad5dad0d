"""
Interchange bridge: versioned export/import documents and IDE workspace views.
"""

from chatprompt.interchange.codec import export_corpus, import_corpus
from chatprompt.interchange.schemas import ExportDocument, ImportResult
from chatprompt.interchange.snippets import (
    generate_snippet, generate_workspace_config, sync_workspace,
)

__all__ = [
    'export_corpus',
    'import_corpus',
    'ExportDocument',
    'ImportResult',
    'generate_snippet',
    'generate_workspace_config',
    'sync_workspace',
]
