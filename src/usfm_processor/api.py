"""FastAPI HTTP layer wrapping ScriptureProcessor."""

from __future__ import annotations

import hmac
import logging
import os
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from usfm_processor.alignments import extract_verse_alignments
from usfm_processor.models import ProcessingOptions
from usfm_processor.processor import PROCESSING_VERSION, ScriptureProcessor
from usfm_processor.text_extractor import extract_plain_text
from usfm_processor.tokenizer import generate_word_tokens

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="USFM Processor API",
    description="Turns parsed USFM books into verses, word tokens, alignments and sections",
    version=PROCESSING_VERSION,
)

API_KEY = os.getenv("API_KEY")
if not API_KEY:
    logger.warning("API_KEY not set. All requests will be allowed.")


@app.middleware("http")
async def verify_api_key(request: Request, call_next):
    if API_KEY and request.url.path != "/health":
        key = request.headers.get("x-api-key", "")
        if not hmac.compare_digest(key, API_KEY):
            return JSONResponse(status_code=401, content={"detail": "Invalid API key"})
    return await call_next(request)


@app.get("/health")
def health():
    """Unauthenticated health check."""
    return {"status": "ok"}


processor = ScriptureProcessor()


# --- Request models ---


class ProcessRequest(BaseModel):
    document: dict[str, Any] = Field(default_factory=dict)
    book_code: str
    book_name: str
    options: ProcessingOptions = Field(default_factory=ProcessingOptions)


class VerseRequest(BaseModel):
    verse_objects: list[dict[str, Any]] = Field(default_factory=list)
    reference: str
    generate_token_ids: bool = True
    include_alignments: bool = True


# --- Endpoints ---


@app.post("/api/process")
def process_book(req: ProcessRequest):
    """Process a usfm-js book document into structured scripture."""
    result = processor.process(req.document, req.book_code, req.book_name, req.options)
    return result.to_dict()


@app.post("/api/verse")
def process_verse(req: VerseRequest):
    """Text, alignments and word tokens for a single verse's objects."""
    tokens = generate_word_tokens(req.verse_objects, req.reference, req.generate_token_ids)
    response: dict[str, Any] = {
        "reference": req.reference,
        "text": extract_plain_text(req.verse_objects),
        "word_tokens": [t.model_dump(mode="json", exclude_none=True) for t in tokens],
    }
    if req.include_alignments:
        response["alignments"] = [
            a.model_dump(mode="json")
            for a in extract_verse_alignments(req.verse_objects, req.reference)
        ]
    return response


def main():
    """Run the API server."""
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
