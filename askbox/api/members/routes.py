# askbox/api/members/routes.py
from flask import Blueprint, request, jsonify, current_app

from askbox.api.members.schemas import MemberCreateSchema, MemberResponseSchema
from askbox.core.errors import BadRequestError

members_bp = Blueprint('members_bp', __name__)

@members_bp.route('', methods=['POST'])
def add_member():
    """
    로그인한 사용자를 등록합니다.
    - 이미 등록된 uid여도 같은 응답을 돌려줍니다.
    """
    member_service = current_app.services['members']
    data = MemberCreateSchema().load(request.get_json(silent=True) or {})
    member_service.register(
        uid=data['uid'],
        email=data['email'],
        display_name=data['display_name'],
        photo_url=data['photo_url'],
    )
    return jsonify({"result": True, "id": data['uid']}), 200


@members_bp.route('/<string:screen_name>', methods=['GET'])
def get_member_by_screen_name(screen_name: str):
    """screen name으로 공개 페이지 주인의 정보를 조회합니다."""
    member_service = current_app.services['members']
    member = member_service.find_by_screen_name(screen_name)
    if member is None:
        raise BadRequestError("존재하지 않는 사용자입니다.")
    return jsonify(MemberResponseSchema().dump(member)), 200
