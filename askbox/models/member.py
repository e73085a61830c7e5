# askbox/models/member.py
from dataclasses import dataclass

@dataclass
class Member:
    """
    Firestore 'members' 컬렉션(및 'screen_names' 색인)의 문서 구조를 정의하는 데이터클래스.
    메시지 순번 카운터(message_count)는 MessageService만 읽고 쓰므로 여기에는 두지 않습니다.
    """
    uid: str
    email: str
    display_name: str = ''
    photo_url: str = ''

    def to_document(self) -> dict:
        """가입 시 members/screen_names 양쪽에 똑같이 기록되는 필드"""
        return {
            'uid': self.uid,
            'email': self.email,
            'display_name': self.display_name,
            'photo_url': self.photo_url,
        }

    @classmethod
    def from_document(cls, data: dict) -> 'Member':
        return cls(
            uid=data['uid'],
            email=data['email'],
            display_name=data.get('display_name', ''),
            photo_url=data.get('photo_url', ''),
        )


def screen_name_from_email(email: str) -> str:
    """이메일에서 도메인을 떼어내 공개 페이지 주소로 쓰는 screen name을 만듭니다."""
    return email.split('@', 1)[0]
