# askbox/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Optional
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException, MethodNotAllowed
import firebase_admin
from firebase_admin import credentials

# - 설정 / 오류
from askbox.core.config import config_by_name
from askbox.core.errors import CustomServerError

# - API 블루프린트
from askbox.api.members.routes import members_bp
from askbox.api.messages.routes import messages_bp

# - 서비스 모듈
from askbox.services.firestore_service import FirestoreService
from askbox.api.members.services import MemberService
from askbox.api.messages.services import MessageService


def _first_validation_message(messages) -> str:
    """marshmallow 오류 dict에서 클라이언트에 돌려줄 첫 번째 메시지를 뽑습니다."""
    if isinstance(messages, dict):
        for field_name, value in messages.items():
            detail = _first_validation_message(value)
            return detail if detail.endswith("누락") else f"{field_name}: {detail}"
    if isinstance(messages, list) and messages:
        return _first_validation_message(messages[0])
    return str(messages)


def create_app(config_name: Optional[str] = None, firestore_service: Optional[FirestoreService] = None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production'. 없으면 FLASK_ENV를 따릅니다.
    :param firestore_service: 외부에서 주입할 저장소 어댑터. 주어지면 firebase_admin을 초기화하지 않습니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 외부 서비스 초기화
    # =====================================================================================
    if firestore_service is None:
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            cred = credentials.Certificate(cred_path)
            options = {}
            if app.config.get('FIREBASE_PROJECT_ID'):
                options['projectId'] = app.config['FIREBASE_PROJECT_ID']
            firebase_admin.initialize_app(cred, options)
        firestore_service = FirestoreService(max_attempts=app.config['FIRESTORE_TRANSACTION_MAX_ATTEMPTS'])

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    try:
        firestore_service.init_app(app)
        app.services['firestore'] = firestore_service
    except Exception as e:
        logging.error(f"Failed to initialize Firestore service: {e}")
        raise

    app.services['members'] = MemberService(firestore_service)
    app.services['messages'] = MessageService(
        firestore_service,
        denied_placeholder=app.config['DENIED_MESSAGE_PLACEHOLDER']
    )

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(members_bp, url_prefix='/api/members')
    app.register_blueprint(messages_bp, url_prefix='/api/messages')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정 (모든 오류 응답은 {"message": ...} 형태)
    # =====================================================================================
    @app.errorhandler(CustomServerError)
    def handle_custom_server_error(err: CustomServerError):
        if err.status_code >= 500:
            logging.error(f"서버 오류: {err.message}", exc_info=True)
        else:
            logging.warning(f"요청 처리 실패 ({err.status_code}): {err.message}")
        return jsonify(err.serialize_errors()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        return jsonify({"message": _first_validation_message(err.messages)}), 400

    @app.errorhandler(MethodNotAllowed)
    def handle_method_not_allowed(err):
        return jsonify({"message": "지원하지 않는 method 입니다."}), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({"message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
