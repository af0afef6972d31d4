from datetime import datetime, timezone

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, jwt_required

from redemption.errors import ValidationError
from redemption.services.campaign_service import create_campaign, list_campaigns, require_campaign
from redemption.services.identity import VENDOR_TOKEN_USE
from redemption.validation import get_json_body, parse_date, parse_id, parse_text, pick

campaigns_bp = Blueprint('campaigns', __name__)

TRUTHY = {'1', 'true', 'yes', 'on'}


@campaigns_bp.route('', methods=['GET'])
def get_campaigns():
    """
    List campaigns
    ---
    tags:
      - Campaigns
    parameters:
      - name: active
        in: query
        type: boolean
        default: false
        description: Only campaigns whose date window contains the reference date
      - name: on
        in: query
        type: string
        description: Reference date (YYYY-MM-DD), defaults to today (UTC)
    responses:
      200:
        description: List of campaigns
      400:
        description: Invalid reference date
    """
    active_on = None
    if (request.args.get('active') or '').strip().lower() in TRUTHY:
        active_on = parse_date(request.args.get('on'), 'on') or datetime.now(timezone.utc).date()

    campaigns = list_campaigns(active_on)
    return jsonify([c.to_dict() for c in campaigns]), 200


@campaigns_bp.route('/<campaign_id>', methods=['GET'])
def get_campaign(campaign_id):
    """
    Get a campaign with its items
    ---
    tags:
      - Campaigns
    parameters:
      - name: campaign_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: Campaign details
      400:
        description: Malformed campaign id
      404:
        description: Campaign not found
    """
    campaign = require_campaign(parse_id(campaign_id, 'campaignId'))
    return jsonify(campaign.to_dict(include_items=True)), 200


@campaigns_bp.route('', methods=['POST'])
@jwt_required(optional=True)
def post_campaign():
    """
    Create a campaign
    ---
    tags:
      - Campaigns
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
          properties:
            name:
              type: string
            item:
              type: string
            items:
              type: array
              items:
                type: string
            startDate:
              type: string
              format: date
            endDate:
              type: string
              format: date
    security:
      - Bearer: []
    responses:
      201:
        description: Campaign created (owned by the vendor when a vendor token is sent)
      400:
        description: Invalid input
    """
    data = get_json_body()
    name = parse_text(data.get('name'), 'name')
    item_name = parse_text(pick(data, 'item', 'itemName', 'item_name'), 'item', required=False)
    start_date = parse_date(pick(data, 'startDate', 'start_date'), 'startDate')
    end_date = parse_date(pick(data, 'endDate', 'end_date'), 'endDate')

    items = data.get('items') or []
    if not isinstance(items, list):
        raise ValidationError('items must be a list of item names')
    items = [parse_text(i, 'items[]') for i in items]

    vendor_id = None
    if get_jwt_identity() is not None and get_jwt().get('token_use') == VENDOR_TOKEN_USE:
        vendor_id = int(get_jwt_identity())

    campaign = create_campaign(
        name=name,
        item_name=item_name,
        start_date=start_date,
        end_date=end_date,
        items=items,
        vendor_id=vendor_id
    )
    return jsonify(campaign.to_dict(include_items=True)), 201
