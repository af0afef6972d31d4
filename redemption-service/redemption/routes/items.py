from flask import Blueprint, jsonify

from redemption.services.campaign_service import create_item, list_items
from redemption.validation import get_json_body, parse_id, parse_text, pick

items_bp = Blueprint('items', __name__)


@items_bp.route('/<campaign_id>', methods=['GET'])
def get_items(campaign_id):
    """
    List items for a campaign
    ---
    tags:
      - Items
    parameters:
      - name: campaign_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: Items of the campaign (empty for an unknown campaign)
      400:
        description: Malformed campaign id
    """
    campaign_id = parse_id(campaign_id, 'campaignId')
    return jsonify([item.to_dict() for item in list_items(campaign_id)]), 200


@items_bp.route('', methods=['POST'])
def post_item():
    """
    Create an item under a campaign
    ---
    tags:
      - Items
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - campaignId
            - name
          properties:
            campaignId:
              type: integer
            name:
              type: string
    responses:
      201:
        description: Item created
      400:
        description: Invalid input or unknown campaign
    """
    data = get_json_body()
    campaign_id = parse_id(pick(data, 'campaignId', 'campaign_id'), 'campaignId')
    name = parse_text(data.get('name'), 'name')

    item = create_item(campaign_id, name)
    return jsonify(item.to_dict()), 201
