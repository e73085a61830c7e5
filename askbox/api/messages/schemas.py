# askbox/api/messages/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from askbox.api.members.schemas import UID_VALIDATORS

class AuthorSchema(Schema):
    """메시지 작성자 정보. 요청에 없으면 익명 메시지입니다."""
    class Meta:
        unknown = EXCLUDE

    display_name = fields.Str(required=True, data_key='displayName')
    photo_url = fields.Str(data_key='photoURL', allow_none=True)

class MessageCreateSchema(Schema):
    """POST /api/messages"""
    class Meta:
        unknown = EXCLUDE

    uid = fields.Str(required=True, validate=UID_VALIDATORS, error_messages={"required": "uid 누락"})
    message = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "message 누락"})
    author = fields.Nested(AuthorSchema, load_default=None, allow_none=True)

class MessageDenySchema(Schema):
    """PUT /api/messages/{message_id}/deny"""
    class Meta:
        unknown = EXCLUDE

    uid = fields.Str(required=True, validate=UID_VALIDATORS, error_messages={"required": "uid 누락"})
    deny = fields.Bool(required=True, error_messages={"required": "deny 누락"})

class MessageReplySchema(Schema):
    """POST /api/messages/{message_id}/reply"""
    class Meta:
        unknown = EXCLUDE

    uid = fields.Str(required=True, validate=UID_VALIDATORS, error_messages={"required": "uid 누락"})
    reply = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "reply 누락"})

class MessageQuerySchema(Schema):
    """uid 만 필요한 조회용 쿼리 스트링"""
    class Meta:
        unknown = EXCLUDE

    uid = fields.Str(required=True, validate=UID_VALIDATORS, error_messages={"required": "uid 누락"})

class MessageListQuerySchema(MessageQuerySchema):
    """GET /api/messages?uid=&page=&size="""
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    size = fields.Int(load_default=None, validate=validate.Range(min=1))

class MessageResponseSchema(Schema):
    """메시지 응답 형식. 값이 없는 선택 필드는 응답에서 빠집니다."""
    id = fields.Str(required=True)
    message = fields.Str(required=True)
    message_no = fields.Int(data_key='messageNo')
    created_at = fields.Str(data_key='createAt')
    author = fields.Nested(AuthorSchema)
    reply = fields.Str()
    replied_at = fields.Str(data_key='replyAt')
    deny = fields.Bool()

class MessagePageSchema(Schema):
    """페이지 단위 메시지 목록 응답 형식"""
    total_elements = fields.Int(data_key='totalElements')
    total_pages = fields.Int(data_key='totalPages')
    page = fields.Int()
    size = fields.Int()
    content = fields.List(fields.Nested(MessageResponseSchema))
