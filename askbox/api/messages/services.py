# askbox/api/messages/services.py

import logging
from typing import Optional, Dict, Any, List
from firebase_admin import firestore

from askbox.core.errors import (
    AlreadyRepliedError,
    MemberNotFoundError,
    MessageNotFoundError,
)
from askbox.models.message import Message, MessageAuthor
from askbox.services.firestore_service import FirestoreService
from askbox.utils.datetime_utils import DateTimeUtils
from .pagination import calculate_page_window

DEFAULT_DENIED_PLACEHOLDER = '비공개 처리된 메시지 입니다.'


class MessageService:
    """
    사용자별 메시지(질문) 목록을 관리하는 서비스 클래스.
    - 메시지는 members/{uid}/messages 하위 컬렉션에 저장됩니다.
    - members/{uid}.message_count를 순번 카운터로 사용하며, 새 메시지의 message_no가 됩니다.
    - 모든 조회/변경은 사용자 문서의 존재 여부를 같은 트랜잭션 안에서 다시 확인합니다.
    """
    def __init__(self, firestore_service: FirestoreService, denied_placeholder: str = DEFAULT_DENIED_PLACEHOLDER):
        self.store = firestore_service
        self.denied_placeholder = denied_placeholder

    # --- 내부 헬퍼 ---

    def _get_member_snapshot(self, transaction, uid: str):
        member_doc = self.store.members_ref.document(uid).get(transaction=transaction)
        if not member_doc.exists:
            raise MemberNotFoundError()
        return member_doc

    def _get_message_snapshot(self, transaction, uid: str, message_id: str):
        # Firestore 트랜잭션은 모든 읽기가 쓰기보다 먼저 와야 합니다.
        self._get_member_snapshot(transaction, uid)
        message_doc = self.store.messages_ref(uid).document(message_id).get(transaction=transaction)
        if not message_doc.exists:
            raise MessageNotFoundError()
        return message_doc

    def _serialize(self, message: Message, redact: bool = True) -> Dict[str, Any]:
        """응답용 dict로 변환합니다. 타임스탬프는 ISO 문자열, 값이 없는 선택 필드는 생략합니다."""
        data = {
            'id': message.id,
            'message': self.denied_placeholder if redact and message.is_denied else message.message,
            'message_no': message.message_no,
            'created_at': DateTimeUtils.to_iso_string(message.created_at),
        }
        if message.author is not None:
            data['author'] = {'display_name': message.author.display_name}
            if message.author.photo_url is not None:
                data['author']['photo_url'] = message.author.photo_url
        if message.reply is not None:
            data['reply'] = message.reply
        replied_at = DateTimeUtils.optional_iso_string(message.replied_at)
        if replied_at is not None:
            data['replied_at'] = replied_at
        if message.deny is not None:
            data['deny'] = message.deny
        return data

    # --- 메시지 등록 ---

    def _post_in_transaction(self, transaction, uid: str, text: str, author: Optional[MessageAuthor]) -> str:
        member_ref = self.store.members_ref.document(uid)
        member_doc = self._get_member_snapshot(transaction, uid)

        # message_count가 아직 없으면 1부터 시작합니다.
        message_count = member_doc.to_dict().get('message_count')
        if message_count is None:
            message_count = 1

        new_message_ref = self.store.messages_ref(uid).document()
        new_message = Message(
            message=text,
            message_no=message_count,
            created_at=self.store.server_timestamp(),
            author=author,
        )
        transaction.set(new_message_ref, new_message.to_document())
        transaction.update(member_ref, {'message_count': message_count + 1})
        return new_message_ref.id

    def post(self, uid: str, text: str, author: Optional[Dict[str, Any]] = None) -> str:
        """
        uid 사용자의 페이지에 새 메시지를 등록하고 생성된 메시지 ID를 반환합니다.
        author가 없으면 익명 메시지로 저장됩니다.
        """
        message_author = MessageAuthor(**author) if author else None
        message_id = self.store.run_transaction(self._post_in_transaction, uid, text, message_author)
        logging.info(f"메시지 등록 (uid: {uid}, message_id: {message_id}, anonymous: {message_author is None})")
        return message_id

    # --- 답글 / 비공개 처리 ---

    def _reply_in_transaction(self, transaction, uid: str, message_id: str, reply: str) -> None:
        message_doc = self._get_message_snapshot(transaction, uid, message_id)
        if message_doc.to_dict().get('reply') is not None:
            raise AlreadyRepliedError()

        transaction.update(message_doc.reference, {
            'reply': reply,
            'replied_at': self.store.server_timestamp(),
        })

    def post_reply(self, uid: str, message_id: str, reply: str) -> None:
        """메시지에 답글을 등록합니다. 답글은 한 번만 등록할 수 있습니다."""
        self.store.run_transaction(self._reply_in_transaction, uid, message_id, reply)
        logging.info(f"답글 등록 (uid: {uid}, message_id: {message_id})")

    def _deny_in_transaction(self, transaction, uid: str, message_id: str, deny: bool) -> Message:
        message_doc = self._get_message_snapshot(transaction, uid, message_id)
        transaction.update(message_doc.reference, {'deny': deny})

        message = Message.from_snapshot(message_doc)
        message.deny = deny
        return message

    def update_deny(self, uid: str, message_id: str, deny: bool) -> Dict[str, Any]:
        """
        메시지의 비공개(deny) 여부를 덮어씁니다. 같은 값으로 여러 번 호출해도 됩니다.
        응답에는 소유자가 방금 변경한 메시지이므로 원문을 그대로 담습니다.
        """
        message = self.store.run_transaction(self._deny_in_transaction, uid, message_id, deny)
        logging.info(f"메시지 비공개 상태 변경 (uid: {uid}, message_id: {message_id}, deny: {deny})")
        return self._serialize(message, redact=False)

    # --- 조회 ---

    def _get_in_transaction(self, transaction, uid: str, message_id: str) -> Message:
        return Message.from_snapshot(self._get_message_snapshot(transaction, uid, message_id))

    def get(self, uid: str, message_id: str) -> Dict[str, Any]:
        """메시지 한 건을 조회합니다. deny 처리된 메시지는 누가 조회하든 본문이 가려집니다."""
        message = self.store.run_transaction(self._get_in_transaction, uid, message_id)
        return self._serialize(message)

    def _list_page_in_transaction(self, transaction, uid: str, page: int, size: int) -> Dict[str, Any]:
        member_doc = self._get_member_snapshot(transaction, uid)
        message_count = member_doc.to_dict().get('message_count') or 0

        window = calculate_page_window(message_count, page, size)
        envelope = {
            'total_elements': window.total_elements,
            'total_pages': window.total_pages,
            'page': window.page,
            'size': window.size,
            'content': [],
        }
        if window.is_out_of_range:
            return envelope

        query = (
            self.store.messages_ref(uid)
            .order_by('message_no', direction=firestore.Query.DESCENDING)
            .start_at({'message_no': window.start_at})
            .limit(size)
        )
        envelope['content'] = [
            self._serialize(Message.from_snapshot(doc))
            for doc in query.stream(transaction=transaction)
        ]
        return envelope

    def list_page(self, uid: str, page: int = 1, size: int = 10) -> Dict[str, Any]:
        """
        message_no 내림차순으로 한 페이지의 메시지를 조회합니다.

        :return: {total_elements, total_pages, page, size, content}
        """
        return self.store.run_transaction(self._list_page_in_transaction, uid, page, size)

    def _list_all_in_transaction(self, transaction, uid: str) -> List[Dict[str, Any]]:
        self._get_member_snapshot(transaction, uid)
        query = self.store.messages_ref(uid).order_by('created_at', direction=firestore.Query.DESCENDING)
        return [
            self._serialize(Message.from_snapshot(doc), redact=False)
            for doc in query.stream(transaction=transaction)
        ]

    def list_all(self, uid: str) -> List[Dict[str, Any]]:
        """
        페이지 구분 없이 전체 메시지를 최신순으로 조회합니다.
        페이지 주인 전용 조회이므로 deny 처리된 메시지도 원문을 그대로 담습니다.
        """
        return self.store.run_transaction(self._list_all_in_transaction, uid)
