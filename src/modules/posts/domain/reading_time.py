"""Reading time estimation.

阅读时间 = ceil(正文总词数 / 每分钟阅读词数)。

词数按单个空格切分段落文本得到，连续空格会产生空词并计入总数，
空段落也计为 1 个词。标题不计入。没有最小值：无正文时结果为 0。
"""

import math
from collections.abc import Iterable

from src.modules.posts.domain.entities import ContentSection, Paragraph

WORDS_PER_MINUTE = 200


def count_words(paragraph: Paragraph) -> int:
    return len(paragraph.text.split(" "))


def count_section_words(section: ContentSection) -> int:
    return sum(count_words(paragraph) for paragraph in section.body)


def estimate_reading_time(
    sections: Iterable[ContentSection],
    words_per_minute: int = WORDS_PER_MINUTE,
) -> int:
    """Estimate minutes needed to read the body of ``sections``.

    Args:
        sections: 有序的正文分节
        words_per_minute: 平均阅读速度

    Returns:
        向上取整后的分钟数
    """
    if words_per_minute <= 0:
        raise ValueError("words_per_minute must be positive")
    total_words = sum(count_section_words(section) for section in sections)
    return math.ceil(total_words / words_per_minute)
