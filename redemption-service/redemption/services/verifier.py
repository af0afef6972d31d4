"""
Proof Verifier — World ID cloud verification
Forwards the proof material verbatim to the World ID developer API and maps the
outcome onto VerificationResult / VerifierUnavailable / VerifierTimeout.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from redemption.errors import ValidationError, VerifierTimeout, VerifierUnavailable

logger = logging.getLogger(__name__)

DEFAULT_WORLD_ID_API_URL = 'https://developer.worldcoin.org'

PROOF_FIELDS = ('merkle_root', 'nullifier_hash', 'proof')
OPTIONAL_PROOF_FIELDS = ('verification_level', 'signal_hash')


@dataclass(frozen=True)
class VerificationResult:
    ok: bool
    identity_hash: Optional[str] = None
    detail: Optional[str] = None


def extract_proof(data):
    """
    Pull the proof material out of a request body.
    Accepts either {"proof": {...}} or the IDKit result spread at the top level.
    """
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    material = data.get('proof')
    if not isinstance(material, dict):
        material = data

    missing = [f for f in PROOF_FIELDS if not material.get(f)]
    if missing:
        raise ValidationError(f"Missing proof fields: {', '.join(missing)}")

    proof = {f: material[f] for f in PROOF_FIELDS}
    for field in OPTIONAL_PROOF_FIELDS:
        if material.get(field):
            proof[field] = material[field]
    return proof


class WorldIDVerifier:
    def __init__(self, app_id, api_url=DEFAULT_WORLD_ID_API_URL, timeout=5.0):
        self.app_id = app_id
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout

    @property
    def verify_url(self):
        return f"{self.api_url}/api/v2/verify/{self.app_id}"

    def verify(self, action, proof) -> VerificationResult:
        if not self.app_id:
            raise VerifierUnavailable('World ID app id is not configured')

        payload = dict(proof)
        payload['action'] = action

        try:
            response = requests.post(self.verify_url, json=payload, timeout=self.timeout)
        except requests.Timeout:
            logger.error("World ID verification timed out after %ss (action=%s)", self.timeout, action)
            raise VerifierTimeout()
        except requests.RequestException as e:
            logger.error("Error calling World ID verification: %s", e)
            raise VerifierUnavailable()

        if response.status_code == 200:
            try:
                body = response.json()
            except ValueError:
                logger.error("World ID returned a non-JSON success response")
                raise VerifierUnavailable()
            if not isinstance(body, dict):
                logger.error("World ID returned an unexpected success body: %r", body)
                raise VerifierUnavailable()
            if not body.get('success'):
                return VerificationResult(ok=False, detail=body.get('detail'))
            # The API echoes the nullifier it checked; fall back to the submitted one
            identity_hash = body.get('nullifier_hash') or proof['nullifier_hash']
            logger.info("World ID proof verified (action=%s)", action)
            return VerificationResult(ok=True, identity_hash=identity_hash)

        if 400 <= response.status_code < 500:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get('detail') if isinstance(body, dict) else None
            detail = detail or response.text
            logger.info("World ID rejected proof (action=%s, status=%s): %s", action, response.status_code, detail)
            return VerificationResult(ok=False, detail=detail)

        logger.error("World ID returned %s: %s", response.status_code, response.text)
        raise VerifierUnavailable()
