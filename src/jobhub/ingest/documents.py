"""
简历文档来源：按引用（对象存储 key / 相对路径）读取简历并转为文本。

对象存储本身是外部协作方；本地实现读取 JOBHUB_DOCUMENT_ROOT 下的文件（上传服务同步到此目录）。
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from jobhub.core.config import get_document_root
from jobhub.core.errors import DocumentNotFound


class DocumentSource(ABC):
    """简历文档来源接口：引用 → 纯文本/Markdown。"""

    @abstractmethod
    def read_text(self, ref: str) -> str:
        """不存在抛 DocumentNotFound。"""
        ...


class LocalDocumentSource(DocumentSource):
    """从根目录读取文件，经 MarkItDown 转换；拒绝越出根目录的路径。"""

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root) if root else get_document_root()

    def resolve(self, ref: str) -> Path:
        root = self.root.resolve()
        path = (root / (ref or "").lstrip("/")).resolve()
        if root != path and root not in path.parents:
            raise DocumentNotFound(ref)
        if not path.is_file():
            raise DocumentNotFound(ref)
        return path

    def read_text(self, ref: str) -> str:
        from .markitdown_convert import stream_to_markdown

        path = self.resolve(ref)
        with open(path, "rb") as f:
            return stream_to_markdown(f, filename=path.name)


_source: DocumentSource | None = None


def get_document_source() -> DocumentSource:
    global _source
    if _source is None:
        _source = LocalDocumentSource()
    return _source
