from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
import logging

# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("robospeak")

app = FastAPI(
    title="Robospeak Engine",
    version="1.0.0",
    description="Procedural Robot Speech Generation Engine"
)

# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # Allow any local port
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from robospeak.core.config import Settings
from robospeak.core.errors import (
    InvalidWeights,
    MalformedRequest,
    RobospeakError,
    SynthesisFailure,
    UnknownSymbol,
)

settings = Settings.from_env()


@app.exception_handler(UnknownSymbol)
@app.exception_handler(InvalidWeights)
@app.exception_handler(MalformedRequest)
async def unprocessable_handler(request: Request, exc: Exception):
    logger.warning("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"status": "error", "message": str(exc)})


@app.exception_handler(SynthesisFailure)
async def synthesis_failure_handler(request: Request, exc: SynthesisFailure):
    logger.error("Synthesis failed on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"status": "error", "message": str(exc)})


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "robospeak"}

from robospeak.params.ranges import get_symbol_range
from robospeak.params.schema import PARAM_SCHEMA
from robospeak.core.types import ALL_SYMBOLS

@app.get("/symbols")
async def list_symbols():
    """
    Range table per symbol plus the synth parameter schema.
    Silence has no range entry; it bakes to a wait drawn from the wait band.
    """
    symbols = {}
    for symbol in ALL_SYMBOLS:
        definition = get_symbol_range(symbol)
        if definition is None:
            symbols[symbol.value] = {
                "symbol": symbol.value,
                "name": "Silence",
                "wait_ms": {"min": settings.wait_min_ms, "max": settings.wait_max_ms},
            }
        else:
            symbols[symbol.value] = definition.to_dict()
    return {"symbols": symbols, "schema": PARAM_SCHEMA}

from robospeak.core.context import GenerationContext
from robospeak.core.types import BakedWord, Symbol, Word, sequence_string
from robospeak.export.exporter import Exporter
from robospeak import pipeline
from fastapi import Response
import base64
from typing import Optional


def _parse(parser, value, what: str):
    """Apply a from_dict-style parser, turning missing fields and bad values into MalformedRequest."""
    try:
        return parser(value)
    except RobospeakError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise MalformedRequest(f"Invalid {what}: {e}") from e


def _seed(body: dict):
    seed = body.get("seed")
    return _parse(int, seed, "seed") if seed is not None else None


@app.post("/generate")
async def generate_utterance(body: Optional[dict] = None):
    """
    Generates, bakes and renders one utterance.
    Returns JSON with the sequence, baked words and base64-encoded audio.
    """
    body = body or {}
    utterance = pipeline.speak(seed=_seed(body), settings=settings)

    return {
        "sequence": utterance.sequence,
        "words": [w.to_dict() for w in utterance.words],
        "baked": [w.to_dict() for w in utterance.baked],
        "filename": Exporter.filename_for(utterance.words),
        "audio": base64.b64encode(utterance.wav).decode("utf-8"),
    }


@app.post("/bake")
async def bake_words(body: dict):
    """
    Bakes a given word sequence: {"words": [{"symbol": "z", "identity": "1"}, ...], "seed"?}
    """
    words = [_parse(Word.from_dict, w, "word") for w in body.get("words", [])]
    ctx = GenerationContext(_seed(body))
    baked = pipeline.bake_sequence(words, ctx, settings)
    return {"baked": [w.to_dict() for w in baked]}


@app.post("/render")
async def render_baked(body: dict):
    """
    Renders baked words (as returned by /bake) to a WAV file.
    """
    baked = [_parse(BakedWord.from_dict, w, "baked word") for w in body.get("baked", [])]
    wav_bytes = pipeline.render(baked, settings=settings)
    return Response(
        content=wav_bytes,
        media_type="audio/wav",
        headers={"Content-Disposition": f"attachment; filename={Exporter.filename_for(baked)}"}
    )


@app.post("/preview/{symbol}")
async def preview_symbol(symbol: str, body: Optional[dict] = None):
    """
    Bakes and renders a single symbol on its own.
    Returns JSON with the baked word and base64-encoded audio.
    """
    body = body or {}
    ctx = GenerationContext(_seed(body))
    words = [Word(Symbol.from_code(symbol), ctx.next_identity())]
    baked = pipeline.bake_sequence(words, ctx, settings)
    wav_bytes = pipeline.render(baked, settings=settings)

    return {
        "baked": baked[0].to_dict(),
        "filename": Exporter.filename_for(words),
        "audio": base64.b64encode(wav_bytes).decode("utf-8"),
    }


@app.post("/export")
async def export_bundle(body: Optional[dict] = None):
    """
    Generates a ZIP file of utterances. Seeds count up from "seed" when given.
    """
    body = body or {}
    seed = _seed(body)
    count = _parse(int, body.get("count", 1), "count")
    if count < 1:
        return JSONResponse(status_code=422, content={"status": "error", "message": "count must be >= 1"})

    utterances = [
        pipeline.speak(seed=None if seed is None else seed + i, settings=settings)
        for i in range(count)
    ]
    logger.info("Exporting %d utterances: %s", count, [sequence_string(u.words) for u in utterances])
    zip_bytes = Exporter.create_bundle_zip(utterances)
    return Response(
        content=zip_bytes,
        media_type="application/zip",
        headers={"Content-Disposition": "attachment; filename=robospeak_bundle.zip"}
    )


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
