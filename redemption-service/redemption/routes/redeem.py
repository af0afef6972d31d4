from flask import Blueprint, current_app, jsonify

from redemption.errors import ValidationError
from redemption.services.identity import issue_verification_token, resolve_identity, verify_proof
from redemption.services.redemption_service import redeem
from redemption.validation import get_json_body, parse_id, parse_text, pick

redeem_bp = Blueprint('redeem', __name__)


@redeem_bp.route('/verify', methods=['POST'])
def verify():
    """
    Verify a World ID proof and issue a short-lived verification token
    ---
    tags:
      - Redemption
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - proof
          properties:
            action:
              type: string
              default: redeem_campaign
            proof:
              type: object
    responses:
      200:
        description: Proof verified, token issued
      400:
        description: Missing, invalid or unsupported proof
      500:
        description: Verification service failure
    """
    data = get_json_body()
    action = parse_text(data.get('action'), 'action', required=False) or current_app.config['REDEEM_ACTION']
    if action not in current_app.config['VERIFIABLE_ACTIONS']:
        raise ValidationError(f'Unsupported action: {action}')

    identity_hash = verify_proof(action, data)
    token, ttl = issue_verification_token(identity_hash, action)

    return jsonify({
        'message': 'Verification successful',
        'verification_token': token,
        'expires_in': ttl
    }), 200


@redeem_bp.route('/redeem', methods=['POST'])
def redeem_item():
    """
    Redeem an item, at most once per person per campaign
    ---
    tags:
      - Redemption
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - campaignId
          properties:
            campaignId:
              type: integer
            itemId:
              type: integer
            proof:
              type: object
              description: World ID proof for the redeem_campaign action
            verificationToken:
              type: string
              description: Token from POST /api/verify, used when no proof is sent
    responses:
      201:
        description: Redemption successful
      400:
        description: Already redeemed, invalid proof or invalid input
      500:
        description: Verification service or database failure
    """
    data = get_json_body()
    campaign_id = parse_id(pick(data, 'campaignId', 'campaign_id'), 'campaignId')
    item_id = parse_id(pick(data, 'itemId', 'item_id'), 'itemId', required=False)

    identity_hash = resolve_identity(current_app.config['REDEEM_ACTION'], data)
    redeem(identity_hash, campaign_id, item_id)

    return jsonify({'message': 'Redemption successful'}), 201
