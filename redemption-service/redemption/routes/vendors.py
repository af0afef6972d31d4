from flask import Blueprint, current_app, jsonify

from redemption.services.identity import issue_vendor_token, verify_proof
from redemption.services.vendor_service import list_vendors, login_vendor
from redemption.validation import get_json_body

vendors_bp = Blueprint('vendors', __name__)


@vendors_bp.route('/login', methods=['POST'])
def login():
    """
    Authenticate or register a vendor with a World ID proof
    ---
    tags:
      - Vendors
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - proof
          properties:
            proof:
              type: object
              properties:
                merkle_root:
                  type: string
                nullifier_hash:
                  type: string
                proof:
                  type: string
                verification_level:
                  type: string
    responses:
      200:
        description: Existing vendor authenticated
      201:
        description: New vendor registered
      400:
        description: Missing or invalid proof
      500:
        description: Verification service or database failure
    """
    data = get_json_body()
    identity_hash = verify_proof(current_app.config['VENDOR_LOGIN_ACTION'], data)

    vendor, created = login_vendor(identity_hash)

    return jsonify({
        'message': 'Vendor registered' if created else 'Vendor authenticated',
        'status': 'registered' if created else 'authenticated',
        'vendorId': vendor.id,
        'access_token': issue_vendor_token(vendor)
    }), 201 if created else 200


@vendors_bp.route('', methods=['GET'])
def get_vendors():
    """
    List vendors
    ---
    tags:
      - Vendors
    responses:
      200:
        description: List of vendors
    """
    return jsonify([v.to_dict() for v in list_vendors()]), 200
