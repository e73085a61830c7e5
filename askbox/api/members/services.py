# askbox/api/members/services.py
import logging
from typing import Optional
from google.api_core import exceptions as google_exceptions

from askbox.core.errors import CustomServerError, ScreenNameConflictError
from askbox.models.member import Member, screen_name_from_email
from askbox.services.firestore_service import FirestoreService


class MemberService:
    """
    사용자 등록과 screen name -> 사용자 조회를 담당하는 서비스 클래스.
    - members/{uid} 문서가 원본이고, screen_names/{screen_name} 문서는 조회용 색인입니다.
    - 두 문서는 항상 같은 트랜잭션 안에서 함께 생성됩니다.
    """
    def __init__(self, firestore_service: FirestoreService):
        self.store = firestore_service

    def _register_in_transaction(self, transaction, member: Member, screen_name: str) -> bool:
        member_ref = self.store.members_ref.document(member.uid)
        screen_name_ref = self.store.screen_names_ref.document(screen_name)

        member_doc = member_ref.get(transaction=transaction)
        screen_name_doc = screen_name_ref.get(transaction=transaction)

        # 이미 가입된 uid라면 기존 값을 건드리지 않고 성공으로 처리합니다.
        if member_doc.exists:
            return False

        if screen_name_doc.exists and screen_name_doc.to_dict().get('uid') != member.uid:
            raise ScreenNameConflictError(screen_name)

        data = member.to_document()
        transaction.set(member_ref, data)
        transaction.set(screen_name_ref, data)
        return True

    def register(self, uid: str, email: str, display_name: Optional[str] = None, photo_url: Optional[str] = None) -> bool:
        """
        새 사용자를 등록합니다. 새로 생성되었으면 True, 이미 있던 사용자면 False를 반환합니다.
        """
        member = Member(uid=uid, email=email, display_name=display_name or '', photo_url=photo_url or '')
        screen_name = screen_name_from_email(email)
        try:
            created = self.store.run_transaction(self._register_in_transaction, member, screen_name)
        except google_exceptions.GoogleAPIError as e:
            logging.error(f"사용자 등록 실패 (uid: {uid}): {e}", exc_info=True)
            raise CustomServerError("서버 오류")

        if created:
            logging.info(f"새 사용자 등록 (uid: {uid}, screen_name: {screen_name})")
        return created

    def find_by_screen_name(self, screen_name: str) -> Optional[Member]:
        """screen name 색인 문서를 한 번 읽어 사용자를 찾습니다. 없으면 None."""
        doc = self.store.screen_names_ref.document(screen_name).get()
        if not doc.exists:
            return None
        return Member.from_document(doc.to_dict())
