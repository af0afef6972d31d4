"""
Identity Service
Every state-mutating request derives its identity hash here: from a World ID proof
verified in the same request, or from a short-lived verification token that
POST /api/verify issued after verifying such a proof.
"""

import datetime
import logging

from flask import current_app, request
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from redemption.errors import InvalidProof, ValidationError
from redemption.services.verifier import extract_proof

logger = logging.getLogger(__name__)

VERIFICATION_TOKEN_USE = 'verification'
VENDOR_TOKEN_USE = 'vendor'


def get_verifier():
    return current_app.extensions['proof_verifier']


def has_proof(data):
    return isinstance(data.get('proof'), dict) or bool(data.get('nullifier_hash'))


def verify_proof(action, data):
    """Verify the proof in `data` for `action` and return the verified identity hash."""
    proof = extract_proof(data)
    result = get_verifier().verify(action, proof)
    if not result.ok:
        logger.info("Rejected proof for action %s: %s", action, result.detail)
        raise InvalidProof(f"Proof verification failed: {result.detail}" if result.detail else None)
    return result.identity_hash


def issue_verification_token(identity_hash, action):
    ttl = current_app.config['VERIFICATION_TOKEN_TTL_SECONDS']
    token = create_access_token(
        identity=identity_hash,
        additional_claims={'token_use': VERIFICATION_TOKEN_USE, 'action': action},
        expires_delta=datetime.timedelta(seconds=ttl)
    )
    return token, ttl


def issue_vendor_token(vendor):
    ttl = current_app.config['ACCESS_TOKEN_TTL_MINUTES']
    return create_access_token(
        identity=str(vendor.id),
        additional_claims={'token_use': VENDOR_TOKEN_USE},
        expires_delta=datetime.timedelta(minutes=ttl)
    )


def _bearer_token(data):
    token = data.get('verificationToken') or data.get('verification_token')
    if token:
        return token
    header = request.headers.get('Authorization', '')
    if header.startswith('Bearer '):
        return header[len('Bearer '):].strip() or None
    return None


def identity_from_token(action, token):
    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException) as e:
        logger.info("Rejected verification token: %s", e)
        raise InvalidProof('Verification token is invalid or expired')

    if claims.get('token_use') != VERIFICATION_TOKEN_USE or claims.get('action') != action:
        raise InvalidProof('Verification token is not valid for this action')
    return claims[current_app.config['JWT_IDENTITY_CLAIM']]


def resolve_identity(action, data):
    """
    Proof in the body wins; otherwise a verification token from the body or the
    Authorization header. A bare client-supplied hash is never accepted.
    """
    if has_proof(data):
        return verify_proof(action, data)

    token = _bearer_token(data)
    if token:
        return identity_from_token(action, token)

    raise ValidationError('Missing proof or verification token')
