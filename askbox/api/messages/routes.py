# askbox/api/messages/routes.py
from flask import Blueprint, request, jsonify, Response, current_app, g

from askbox.api.messages.schemas import (
    MessageCreateSchema,
    MessageDenySchema,
    MessageListQuerySchema,
    MessagePageSchema,
    MessageQuerySchema,
    MessageReplySchema,
    MessageResponseSchema,
)
from askbox.core.errors import UnauthorizedError
from askbox.core.security import id_token_required

messages_bp = Blueprint('messages_bp', __name__)

@messages_bp.route('', methods=['POST'])
def post_message():
    """
    특정 사용자의 페이지에 메시지를 남깁니다.
    - author가 없으면 익명 메시지로 저장됩니다.
    - 성공 시 본문 없이 201 Created를 반환합니다.
    """
    message_service = current_app.services['messages']
    data = MessageCreateSchema().load(request.get_json(silent=True) or {})
    message_service.post(uid=data['uid'], text=data['message'], author=data['author'])
    return Response(status=201)


@messages_bp.route('', methods=['GET'])
def list_messages():
    """특정 사용자의 메시지 목록을 message_no 내림차순 페이지 단위로 조회합니다."""
    message_service = current_app.services['messages']
    args = MessageListQuerySchema().load(request.args)
    size = args['size'] or current_app.config['DEFAULT_PAGE_SIZE']
    page = message_service.list_page(uid=args['uid'], page=args['page'], size=size)
    return jsonify(MessagePageSchema().dump(page)), 200


@messages_bp.route('/all', methods=['GET'])
@id_token_required
def list_all_messages():
    """
    특정 사용자의 전체 메시지를 최신순으로 조회합니다. (페이지 주인 본인만 가능)
    비공개 처리된 메시지도 원문이 그대로 내려갑니다.
    """
    message_service = current_app.services['messages']
    args = MessageQuerySchema().load(request.args)
    if args['uid'] != g.uid:
        raise UnauthorizedError("조회 권한이 없습니다.")

    messages = message_service.list_all(uid=args['uid'])
    return jsonify(MessageResponseSchema(many=True).dump(messages)), 200


@messages_bp.route('/<string:message_id>', methods=['GET'])
def get_message(message_id: str):
    """메시지 한 건을 조회합니다."""
    message_service = current_app.services['messages']
    args = MessageQuerySchema().load(request.args)
    message = message_service.get(uid=args['uid'], message_id=message_id)
    return jsonify(MessageResponseSchema().dump(message)), 200


@messages_bp.route('/<string:message_id>/deny', methods=['PUT'])
@id_token_required
def deny_message(message_id: str):
    """
    메시지를 비공개 처리하거나 해제합니다. (페이지 주인 본인만 가능)
    """
    message_service = current_app.services['messages']
    data = MessageDenySchema().load(request.get_json(silent=True) or {})
    if data['uid'] != g.uid:
        raise UnauthorizedError("수정 권한이 없습니다.")

    updated = message_service.update_deny(uid=data['uid'], message_id=message_id, deny=data['deny'])
    return jsonify(MessageResponseSchema().dump(updated)), 200


@messages_bp.route('/<string:message_id>/reply', methods=['POST'])
def post_reply(message_id: str):
    """메시지에 답글을 등록합니다. 성공 시 201 Created."""
    message_service = current_app.services['messages']
    data = MessageReplySchema().load(request.get_json(silent=True) or {})
    message_service.post_reply(uid=data['uid'], message_id=message_id, reply=data['reply'])
    return Response(status=201)
