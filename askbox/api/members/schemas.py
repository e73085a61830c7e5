# askbox/api/members/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

# uid는 Firestore 문서 ID로 쓰이므로 비어 있거나 '/'를 포함할 수 없습니다.
UID_VALIDATORS = [
    validate.Length(min=1, error="uid 누락"),
    validate.Regexp(r'^[^/]+$', error="'/' 문자는 사용할 수 없습니다."),
]

class MemberCreateSchema(Schema):
    """
    POST /api/members
    인증을 마친 클라이언트가 사용자 등록을 요청할 때의 데이터 형식을 정의합니다.
    """
    class Meta:
        unknown = EXCLUDE

    uid = fields.Str(required=True, validate=UID_VALIDATORS, error_messages={"required": "uid 누락"})
    email = fields.Email(required=True, error_messages={"required": "email 누락"})
    display_name = fields.Str(data_key='displayName', load_default=None, allow_none=True)
    photo_url = fields.Str(data_key='photoURL', load_default=None, allow_none=True)

    @validates_schema
    def validate_screen_name(self, data, **kwargs):
        """이메일 @ 앞부분이 screen name 문서 ID가 되므로 '/'를 허용하지 않습니다."""
        if '/' in data['email'].split('@', 1)[0]:
            raise ValidationError("'/' 문자는 사용할 수 없습니다.", 'email')

class MemberResponseSchema(Schema):
    """
    GET /api/members/{screen_name}
    공개 페이지 주인의 정보를 응답할 때 사용하는 스키마.
    """
    uid = fields.Str(required=True)
    email = fields.Str(required=True)
    display_name = fields.Str(data_key='displayName')
    photo_url = fields.Str(data_key='photoURL')
