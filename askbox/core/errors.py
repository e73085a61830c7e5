# askbox/core/errors.py

class CustomServerError(Exception):
    """
    HTTP 상태 코드와 메시지를 함께 담는 서버 오류.
    create_app에 등록된 에러 핸들러가 {"message": ...} 형태로 직렬화합니다.
    """
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def serialize_errors(self) -> dict:
        return {"message": self.message}


class BadRequestError(CustomServerError):
    """잘못된 요청(400)."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class UnauthorizedError(CustomServerError):
    """인증/권한 오류(401)."""
    def __init__(self, message: str = "권한이 없습니다."):
        super().__init__(message, status_code=401)


# --- 도메인 상태 오류 (트랜잭션 안에서 발생하고 그대로 응답됩니다) ---

class MemberNotFoundError(BadRequestError):
    def __init__(self):
        super().__init__("존재하지 않는 사용자입니다.")


class MessageNotFoundError(BadRequestError):
    def __init__(self):
        super().__init__("존재하지 않는 게시글입니다.")


class AlreadyRepliedError(BadRequestError):
    def __init__(self):
        super().__init__("이미 답글이 등록된 메시지입니다.")


class ScreenNameConflictError(BadRequestError):
    def __init__(self, screen_name: str):
        super().__init__(f"'{screen_name}'은(는) 이미 다른 사용자가 사용 중입니다.")
