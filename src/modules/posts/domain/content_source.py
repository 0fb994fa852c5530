"""Content source port.

内容源（无头 CMS）的领域接口。具体实现位于 infrastructure 层，
应用层只依赖这里定义的协议。
"""

import json
from abc import ABC, abstractmethod

from src.modules.posts.domain.entities import PageResult, PostContent


def at(fragment: str, value: str) -> str:
    """Build an equality predicate, e.g. ``[at(document.type, "post")]``."""
    return f"[at({fragment}, {json.dumps(value, ensure_ascii=False)})]"


class ContentSource(ABC):
    """Read-only access to the documents of a content repository.

    实现必须把所有传输层和解析错误转换为 ``ContentFetchError``，
    查不到的文档转换为 ``PostNotFoundError``。
    """

    @abstractmethod
    async def query(self, predicates: list[str], page_size: int) -> PageResult:
        """Fetch the first page of documents matching all predicates."""
        pass

    @abstractmethod
    async def fetch_by_cursor(self, cursor: str) -> PageResult:
        """Fetch the page a previous result's ``next_cursor`` points at."""
        pass

    @abstractmethod
    async def get_by_uid(self, document_type: str, uid: str) -> PostContent:
        """Fetch a single document by its uid."""
        pass
