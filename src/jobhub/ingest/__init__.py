# 简历文档来源 + MarkItDown 转换

from .documents import DocumentSource, LocalDocumentSource, get_document_source
from .markitdown_convert import stream_to_markdown

__all__ = [
    "DocumentSource",
    "LocalDocumentSource",
    "get_document_source",
    "stream_to_markdown",
]
