# askbox/api/messages/pagination.py
"""
message_count를 기준으로 메시지 목록의 페이지 구간을 계산합니다.

물리적인 스캔 오프셋 대신 사용자별 순번(message_no)을 커서로 사용하므로,
새 메시지가 계속 추가되는 중에도 페이지 구간을 안정적으로 계산할 수 있습니다.
message_count는 1부터 시작하므로 실제 메시지 수는 message_count - 1 입니다.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PageWindow:
    total_elements: int
    total_pages: int
    page: int
    size: int
    # 이 페이지에 나타날 가장 큰 message_no. 범위를 벗어난 페이지면 None
    start_at: Optional[int]

    @property
    def is_out_of_range(self) -> bool:
        return self.start_at is None


def calculate_page_window(message_count: int, page: int, size: int) -> PageWindow:
    if page < 1 or size < 1:
        raise ValueError("page와 size는 1 이상이어야 합니다.")

    total_elements = message_count - 1 if message_count != 0 else 0
    remains = total_elements % size
    total_pages = (total_elements - remains) // size + (1 if remains > 0 else 0)
    start_at = total_elements - (page - 1) * size

    if start_at < 0:
        # 기존 클라이언트와의 호환을 위해 범위를 벗어난 페이지는 total_pages를 0으로 응답합니다.
        return PageWindow(total_elements=total_elements, total_pages=0, page=page, size=size, start_at=None)

    return PageWindow(total_elements=total_elements, total_pages=total_pages, page=page, size=size, start_at=start_at)
