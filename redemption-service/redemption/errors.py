"""
Error taxonomy for the redemption service.
Each error carries the HTTP status and error_code returned to clients as
{"message": ..., "error_code": ...}.
"""


class RedemptionServiceError(Exception):
    status_code = 500
    error_code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"message": self.message, "error_code": self.error_code}


class ValidationError(RedemptionServiceError):
    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class InvalidProof(RedemptionServiceError):
    status_code = 400
    error_code = "INVALID_PROOF"
    default_message = "Proof verification failed"


class AlreadyRedeemed(RedemptionServiceError):
    status_code = 400
    error_code = "ALREADY_REDEEMED"
    default_message = "Already redeemed in this campaign"


class CampaignNotFound(RedemptionServiceError):
    status_code = 404
    error_code = "CAMPAIGN_NOT_FOUND"
    default_message = "The requested campaign could not be found."


class StorageError(RedemptionServiceError):
    error_code = "STORAGE_ERROR"


class VerifierUnavailable(RedemptionServiceError):
    error_code = "VERIFIER_UNAVAILABLE"
    default_message = "Verification service unavailable"


class VerifierTimeout(VerifierUnavailable):
    error_code = "VERIFIER_TIMEOUT"
    default_message = "Verification service timed out"
