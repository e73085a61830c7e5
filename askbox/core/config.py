# askbox/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # Firebase 프로젝트 ID. 서비스 계정 파일에 포함되어 있으면 비워 둬도 됩니다.
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')

    # 메시지 목록 조회 시 size 파라미터가 없을 때 사용하는 기본 페이지 크기
    DEFAULT_PAGE_SIZE = int(os.getenv('DEFAULT_PAGE_SIZE', 10))

    # 트랜잭션 충돌 시 최대 시도 횟수
    FIRESTORE_TRANSACTION_MAX_ATTEMPTS = int(os.getenv('FIRESTORE_TRANSACTION_MAX_ATTEMPTS', 5))

    # deny 처리된 메시지를 조회할 때 본문 대신 내려주는 문구
    DENIED_MESSAGE_PLACEHOLDER = '비공개 처리된 메시지 입니다.'

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    # 개발용 Firebase 프로젝트의 서비스 계정 키 파일 경로
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택할 때 사용합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
