from fastapi import HTTPException, status


class MissingParametersError(HTTPException):
    def __init__(self):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required parameters")


class TextTooLongError(HTTPException):
    def __init__(self, max_length: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Text exceeds maximum length of {max_length} characters",
        )


class InvalidVoiceSettingError(HTTPException):
    def __init__(self, name: str, value: float):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{name} must be between 0 and 1, got {value}",
        )


class VendorRequestError(HTTPException):
    """Vendor or transport failure, always surfaced to the caller as a 500."""

    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


class InvalidVoiceIdError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="voiceId may only contain letters, digits, '_' and '-'",
        )
