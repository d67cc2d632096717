"""FastAPI interface for lufs_gain."""

import io
from uuid import uuid4

from fastapi import FastAPI, File, Header, HTTPException, UploadFile

from .audio_contract import UnsupportedFormatError, ensure_supported_upload
from .interfaces.api_handlers import analyze_uploaded_bytes

app = FastAPI(title="lufs_gain API", version="0.1.0")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/analyze")
async def analyze(
    audio: UploadFile = File(...),
    x_correlation_id: str | None = Header(default=None),
) -> dict:
    correlation_id = x_correlation_id or str(uuid4())
    payload = await audio.read()
    try:
        ensure_supported_upload(audio.filename, audio.content_type)
        result = analyze_uploaded_bytes(
            io.BytesIO(payload),
            filename=audio.filename,
            correlation_id=correlation_id,
        )
    except UnsupportedFormatError as error:
        raise HTTPException(status_code=422, detail=error.as_dict()) from error

    return {"correlation_id": correlation_id, **result}
