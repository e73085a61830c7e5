import logging
from functools import wraps
from flask import request, g
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from askbox.core.errors import BadRequestError, UnauthorizedError


def _extract_token(auth_header: str) -> str:
    # "Bearer <token>" 과 토큰만 보내는 경우를 모두 허용합니다.
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return auth_header.strip()


def id_token_required(f):
    """
    Authorization 헤더의 Firebase ID 토큰을 검증하고, 디코딩된 uid를 g.uid에 저장합니다.
    - 헤더가 없으면 401
    - 토큰 검증에 실패하면 400
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            raise UnauthorizedError()

        token = _extract_token(auth_header)
        try:
            decoded = firebase_auth.verify_id_token(token)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logging.warning(f"ID 토큰 검증 실패: {e}")
            raise BadRequestError("Token에 문제가 있습니다.")

        g.uid = decoded.get("uid")
        return f(*args, **kwargs)

    return decorated_function
