# conftest.py
"""
테스트 공용 fixture.

실제 Firestore 대신 메모리에서 동작하는 대역(FakeFirestoreClient)을 사용합니다.
- 컬렉션 / 하위 컬렉션 / 자동 문서 ID
- order_by + start_at + limit 쿼리
- 트랜잭션: firestore.transactional이 호출하는 _begin/_commit/_rollback을 그대로 구현합니다.
  읽은 문서의 버전이 commit 시점에 바뀌어 있으면 Aborted를 던지고, 재시도는 실제 클라이언트 코드가 맡습니다.
- SERVER_TIMESTAMP는 commit 시점의 UTC 시간으로 치환
"""
import copy
import threading
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from askbox import create_app
from askbox.api.members.services import MemberService
from askbox.api.messages.services import MessageService
from askbox.services.firestore_service import FirestoreService


class FakeDocumentSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self._data = data

    @property
    def id(self):
        return self.reference.id

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentReference:
    def __init__(self, client, path):
        self._client = client
        self._path = path

    @property
    def id(self):
        return self._path[-1]

    @property
    def path(self):
        return "/".join(self._path)

    def collection(self, name):
        return FakeCollectionReference(self._client, self._path + (name,))

    def get(self, transaction=None):
        return FakeDocumentSnapshot(self, self._client._read(self._path, transaction))

    def set(self, data):
        self._client._apply('set', self._path, data)

    def update(self, data):
        self._client._apply('update', self._path, data)


class FakeQuery:
    def __init__(self, client, collection_path, order=None, start=None, limit_count=None):
        self._client = client
        self._collection_path = collection_path
        self._order = order
        self._start = start
        self._limit = limit_count

    def _copy(self, **changes):
        params = dict(order=self._order, start=self._start, limit_count=self._limit)
        params.update(changes)
        return FakeQuery(self._client, self._collection_path, **params)

    def order_by(self, field_path, direction=firestore.Query.ASCENDING):
        return self._copy(order=(field_path, direction))

    def start_at(self, document_fields):
        return self._copy(start=dict(document_fields))

    def limit(self, count):
        return self._copy(limit_count=count)

    def stream(self, transaction=None):
        docs = self._client._children(self._collection_path, transaction)
        if self._order is not None:
            field_path, direction = self._order
            descending = direction == firestore.Query.DESCENDING
            # Firestore처럼 정렬 필드가 없는 문서는 결과에서 빠집니다.
            docs = [(path, data) for path, data in docs if field_path in data]
            docs.sort(key=lambda item: item[1][field_path], reverse=descending)
            if self._start is not None:
                bound = self._start[field_path]
                if descending:
                    docs = [(path, data) for path, data in docs if data[field_path] <= bound]
                else:
                    docs = [(path, data) for path, data in docs if data[field_path] >= bound]
        if self._limit is not None:
            docs = docs[:self._limit]
        for path, data in docs:
            yield FakeDocumentSnapshot(FakeDocumentReference(self._client, path), data)

    def get(self, transaction=None):
        return list(self.stream(transaction=transaction))


class FakeCollectionReference(FakeQuery):
    def __init__(self, client, collection_path):
        super().__init__(client, collection_path)

    def document(self, document_id=None):
        document_id = document_id or uuid.uuid4().hex[:20]
        return FakeDocumentReference(self._client, self._collection_path + (document_id,))


class FakeTransaction:
    """
    google.cloud.firestore의 Transaction이 firestore.transactional에 제공하는 부분만 구현한 대역.
    - 트랜잭션 안에서 읽은 문서/컬렉션의 버전을 기록해 둡니다.
    - _commit 시점에 그 버전이 바뀌어 있으면 Aborted를 던지고 아무것도 쓰지 않습니다.
    """

    def __init__(self, client, max_attempts=5, read_only=False):
        self._client = client
        self._max_attempts = max_attempts
        self._read_only = read_only
        self._id = None
        self._writes = []
        self._read_versions = {}
        self.attempts = 0
        self.rollbacks = 0

    @property
    def in_progress(self):
        return self._id is not None

    def _clean_up(self):
        self._writes = []
        self._read_versions = {}
        self._id = None

    def _begin(self, retry_id=None):
        if self.in_progress:
            raise ValueError("Cannot begin a transaction that is already in progress.")
        self._id = uuid.uuid4().bytes
        self.attempts += 1

    def _record_read(self, key):
        # 같은 시도 안에서 처음 읽은 버전만 기준으로 삼습니다.
        self._read_versions.setdefault(key, self._client._version(key))

    def _add_write(self, op, reference, data):
        if self._read_only:
            raise ValueError("Cannot perform write operation in read-only transaction.")
        self._writes.append((op, reference._path, data))

    def set(self, reference, document_data, merge=False):
        self._add_write('set', reference, document_data)

    def update(self, reference, field_updates):
        self._add_write('update', reference, field_updates)

    def _commit(self):
        if not self.in_progress:
            raise ValueError("Transaction not in progress, cannot be committed.")
        with self._client.lock:
            for key, version in self._read_versions.items():
                if self._client._version(key) != version:
                    raise google_exceptions.Aborted(f"Transaction lock timeout: {'/'.join(key)}")
            self._client._apply_all(self._writes)
        self._clean_up()
        return []

    def _rollback(self):
        if not self.in_progress:
            raise ValueError("Transaction not in progress, cannot be rolled back.")
        self.rollbacks += 1
        self._clean_up()


class FakeFirestoreClient:
    def __init__(self):
        self.lock = threading.RLock()
        self._documents = {}
        # 문서 경로(짝수 길이)와 컬렉션 경로(홀수 길이) 별 변경 횟수
        self._versions = {}
        self._last_timestamp = None
        self.transactions = []

    def collection(self, name):
        return FakeCollectionReference(self, (name,))

    def transaction(self, max_attempts=5, read_only=False):
        transaction = FakeTransaction(self, max_attempts=max_attempts, read_only=read_only)
        self.transactions.append(transaction)
        return transaction

    def _server_now(self):
        # 같은 마이크로초에 두 번 커밋되어도 시간 순서가 유지되도록 단조 증가시킵니다.
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def _resolve(self, data):
        resolved = {}
        for key, value in data.items():
            if value is firestore.SERVER_TIMESTAMP:
                resolved[key] = self._server_now()
            elif isinstance(value, dict):
                resolved[key] = self._resolve(value)
            else:
                resolved[key] = copy.deepcopy(value)
        return resolved

    def _version(self, key):
        return self._versions.get(key, 0)

    def _read(self, path, transaction=None):
        with self.lock:
            if transaction is not None:
                transaction._record_read(path)
            return copy.deepcopy(self._documents.get(path))

    def _children(self, collection_path, transaction=None):
        with self.lock:
            if transaction is not None:
                transaction._record_read(collection_path)
            return [
                (path, copy.deepcopy(data))
                for path, data in self._documents.items()
                if len(path) == len(collection_path) + 1 and path[:-1] == collection_path
            ]

    def _apply(self, op, path, data):
        with self.lock:
            if op == 'set':
                self._documents[path] = self._resolve(data)
            else:
                if path not in self._documents:
                    raise google_exceptions.NotFound(f"No document to update: {'/'.join(path)}")
                self._documents[path].update(self._resolve(data))
            self._versions[path] = self._version(path) + 1
            self._versions[path[:-1]] = self._version(path[:-1]) + 1

    def _apply_all(self, writes):
        """모든 쓰기가 반영 가능한지 먼저 확인한 뒤 한 번에 반영합니다."""
        with self.lock:
            created = set()
            for op, path, _ in writes:
                if op == 'set':
                    created.add(path)
                elif path not in created and path not in self._documents:
                    raise google_exceptions.NotFound(f"No document to update: {'/'.join(path)}")
            for op, path, data in writes:
                self._apply(op, path, data)


@pytest.fixture
def firestore_client():
    return FakeFirestoreClient()


@pytest.fixture
def firestore_service(firestore_client):
    return FirestoreService(firestore_client)


@pytest.fixture
def member_service(firestore_service):
    return MemberService(firestore_service)


@pytest.fixture
def message_service(firestore_service):
    return MessageService(firestore_service)


@pytest.fixture
def registered_uid(member_service):
    member_service.register(uid='u1', email='u1@gmail.com', display_name='유저1', photo_url='https://example.com/u1.png')
    return 'u1'


@pytest.fixture
def app(firestore_service):
    return create_app('testing', firestore_service=firestore_service)


@pytest.fixture
def client(app):
    return app.test_client()
