# askbox/services/firestore_service.py
import logging
from typing import Any, Callable, Optional
from flask import Flask
from firebase_admin import firestore

# Firestore 컬렉션 명칭
MEMBER_COL = 'members'
SCREEN_NAME_COL = 'screen_names'
MESSAGE_COL = 'messages'

# 동시 트랜잭션과 충돌했을 때 fn을 다시 실행하는 최대 횟수 (google-cloud-firestore 기본값과 같음)
DEFAULT_MAX_ATTEMPTS = 5


class FirestoreService:
    """
    Firestore 클라이언트를 감싸는 얇은 어댑터.
    - 클라이언트는 create_app에서 한 번 생성되어 각 도메인 서비스에 주입됩니다.
    - 여러 문서를 원자적으로 읽고 쓰는 작업은 run_transaction으로만 수행합니다.
    """

    def __init__(self, db: Optional[Any] = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.db = db
        self.max_attempts = max_attempts

    def init_app(self, app: Flask):
        """firebase_admin.initialize_app 이후에 호출되어 기본 Firestore 클라이언트를 설정합니다."""
        if self.db is None:
            self.db = firestore.client()
        logging.info("FirestoreService: Firestore 클라이언트가 성공적으로 초기화되었습니다.")

    @property
    def members_ref(self):
        return self.db.collection(MEMBER_COL)

    @property
    def screen_names_ref(self):
        return self.db.collection(SCREEN_NAME_COL)

    def messages_ref(self, uid: str):
        """사용자 문서 아래에 중첩된 messages 하위 컬렉션"""
        return self.members_ref.document(uid).collection(MESSAGE_COL)

    @staticmethod
    def server_timestamp():
        """커밋 시점에 Firestore 서버 시간으로 치환되는 값"""
        return firestore.SERVER_TIMESTAMP

    def run_transaction(self, fn: Callable, *args, **kwargs):
        """
        fn(transaction, *args, **kwargs)를 하나의 트랜잭션 안에서 실행합니다.

        fn 안의 모든 읽기/쓰기는 전부 커밋되거나 전부 롤백됩니다.
        동시 트랜잭션과 충돌하면 Firestore 클라이언트가 fn을 처음부터 다시 실행하며,
        max_attempts번 모두 충돌하면 ValueError가 발생합니다.
        fn에서 발생한 예외는 롤백 후 그대로 호출자에게 전달됩니다.
        """
        transaction = self.db.transaction(max_attempts=self.max_attempts)
        return firestore.transactional(fn)(transaction, *args, **kwargs)
