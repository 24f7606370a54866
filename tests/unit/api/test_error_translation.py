import pytest

from src.vidnorm.api.errors import GENERIC_MESSAGE, translate
from src.vidnorm.exceptions import (
    ArtifactNotFoundError,
    MissingFileError,
    RateLimitedError,
    StoreUnavailableError,
    TranscodeFailedError,
    UnauthorizedError,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("error", "status_code", "status", "message"),
    [
        (MissingFileError(), 400, "fail", "No video file uploaded"),
        (ArtifactNotFoundError(), 404, "fail", "Video not found"),
        (StoreUnavailableError(), 500, "error", "Processed directory not found"),
        (UnauthorizedError(), 401, "error", "Unauthorized: Invalid API key"),
        (RateLimitedError(30), 429, "fail", "Too many requests from this IP, please try again later"),
    ],
)
def test_translate_domain_errors(error, status_code: int, status: str, message: str) -> None:
    code, body = translate(error, debug=False)

    assert code == status_code
    assert body == {"success": False, "status": status, "message": message}


def test_translate_hides_transcoder_diagnostic_in_production() -> None:
    code, body = translate(TranscodeFailedError("Invalid data found"), debug=False)

    assert code == 500
    assert body["message"] == "Error processing video"
    assert "stack" not in body


def test_translate_includes_diagnostic_and_stack_in_debug() -> None:
    try:
        raise TranscodeFailedError("Invalid data found")
    except TranscodeFailedError as exc:
        code, body = translate(exc, debug=True)

    assert code == 500
    assert body["message"] == "Error processing video: Invalid data found"
    assert "TranscodeFailedError" in body["stack"]


def test_translate_unexpected_error_is_generic() -> None:
    code, body = translate(KeyError("secret-path"), debug=False)

    assert code == 500
    assert body == {"success": False, "status": "error", "message": GENERIC_MESSAGE}
