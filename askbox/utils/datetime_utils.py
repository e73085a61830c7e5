# askbox/utils/datetime_utils.py
"""
Firestore 타임스탬프와 API 응답용 ISO 문자열 사이의 변환을 모아둔 유틸리티 모듈

- Firestore에는 서버 타임스탬프(네이티브 timestamp)로 저장합니다.
- API 응답에는 밀리초 단위의 UTC ISO-8601 문자열(Z 접미사)로 내려줍니다.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """
        datetime(또는 Firestore DatetimeWithNanoseconds)을 ISO 문자열로 변환
        예: 2024-01-15T10:30:00.123Z
        """
        try:
            if dt.tzinfo is None:
                # timezone-naive인 경우 UTC로 가정
                dt = dt.replace(tzinfo=timezone.utc)
            else:
                dt = dt.astimezone(timezone.utc)

            return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

        except Exception as e:
            logger.error(f"ISO 문자열 변환 실패: {dt} - {e}")
            raise ValueError(f"datetime 객체를 ISO 문자열로 변환할 수 없습니다: {dt}")

    @staticmethod
    def optional_iso_string(value: Any) -> Optional[str]:
        """값이 없으면 None, 있으면 ISO 문자열을 반환 (replied_at 처럼 선택적인 필드용)"""
        if value is None:
            return None
        return DateTimeUtils.to_iso_string(value)

