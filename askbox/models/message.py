# askbox/models/message.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any

@dataclass
class MessageAuthor:
    """메시지 문서 내부에 저장될 작성자 정보. 없으면 익명 메시지입니다."""
    display_name: str
    photo_url: Optional[str] = None

@dataclass
class Message:
    """
    Firestore 'members/{uid}/messages' 하위 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    message: str
    message_no: int
    # 저장 시에는 SERVER_TIMESTAMP, 조회 시에는 datetime
    created_at: Any
    author: Optional[MessageAuthor] = None
    reply: Optional[str] = None
    replied_at: Optional[datetime] = None
    deny: Optional[bool] = None
    id: Optional[str] = field(default=None, compare=False)

    @property
    def is_denied(self) -> bool:
        return self.deny is True

    def to_document(self) -> Dict[str, Any]:
        """새 메시지 문서. 값이 없는 선택 필드는 기록하지 않습니다."""
        doc = {
            'message': self.message,
            'message_no': self.message_no,
            'created_at': self.created_at,
        }
        if self.author is not None:
            doc['author'] = {'display_name': self.author.display_name}
            if self.author.photo_url is not None:
                doc['author']['photo_url'] = self.author.photo_url
        return doc

    @classmethod
    def from_snapshot(cls, snapshot) -> 'Message':
        data = snapshot.to_dict()
        author = data.get('author')
        return cls(
            id=snapshot.id,
            message=data['message'],
            message_no=data['message_no'],
            created_at=data['created_at'],
            author=MessageAuthor(**author) if author else None,
            reply=data.get('reply'),
            replied_at=data.get('replied_at'),
            deny=data.get('deny'),
        )
