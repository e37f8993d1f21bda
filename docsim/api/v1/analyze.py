"""Sentence-level analysis API: upload 2-5 documents, get matching sentences back."""
from __future__ import annotations

import asyncio
import math
from pathlib import Path
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from docsim.api.deps import get_app_settings, get_readers_service, get_similarity_pipeline
from docsim.core.config import Settings
from docsim.core.errors import (
    FileTooLargeError,
    InsufficientDocumentsError,
    InvalidRequestError,
    InvalidThresholdError,
    TooManyDocumentsError,
    TotalSizeTooLargeError,
)
from docsim.models.analysis import AnalysisResult
from docsim.services.similarity_pipeline import SimilarityPipeline
from docsim.tools.readers import ReadersService

router = APIRouter(tags=["Analysis"])

READ_CHUNK_SIZE = 1024 * 1024


class MetadataModel(BaseModel):
    documents_count: int
    total_sentences: int
    processing_time_ms: int
    threshold: float


class SentenceMatchModel(BaseModel):
    source_doc: str
    source_sentence_index: int
    source_sentence: str
    target_doc: str
    target_sentence_index: int
    target_sentence: str
    similarity: float


class GlobalSimilarityModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    doc_a: str = Field(..., alias="docA")
    doc_b: str = Field(..., alias="docB")
    score: float


class AnalysisResponse(BaseModel):
    metadata: MetadataModel
    matches: List[SentenceMatchModel]
    global_similarity: List[GlobalSimilarityModel]

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        return cls.model_validate(result.to_dict())


def parse_threshold(raw: Optional[str], default: float) -> float:
    """Parse the optional form field; must be a finite number in [0, 1]."""
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        raise InvalidThresholdError(raw)
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise InvalidThresholdError(raw)
    return value


async def read_uploads(files: List[UploadFile], settings: Settings) -> List[Tuple[str, bytes]]:
    """Read every upload into memory, enforcing per-file and total size limits."""
    uploads: List[Tuple[str, bytes]] = []
    total_size = 0
    for upload in files:
        filename = Path(upload.filename or "").name
        if not filename:
            raise InvalidRequestError("File is missing filename")

        buffer = bytearray()
        while True:
            chunk = await upload.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            buffer.extend(chunk)
            if len(buffer) > settings.max_file_size:
                raise FileTooLargeError(filename, settings.max_file_size)
            if total_size + len(buffer) > settings.max_total_size:
                raise TotalSizeTooLargeError(settings.max_total_size)

        total_size += len(buffer)
        uploads.append((filename, bytes(buffer)))
    return uploads


def extract_documents(readers: ReadersService, uploads: List[Tuple[str, bytes]]) -> List[Tuple[str, str]]:
    return [(filename, readers.extract_text(filename, data)) for filename, data in uploads]


@router.post("/analyze", response_model=AnalysisResponse, summary="Analyze sentence-level similarity")
async def analyze_files(
    files: Optional[List[UploadFile]] = File(None, description="2-5 PDF, DOCX or TXT documents"),
    threshold: Optional[str] = Form(None, description="Similarity threshold between 0.0 and 1.0"),
    settings: Settings = Depends(get_app_settings),
    pipeline: SimilarityPipeline = Depends(get_similarity_pipeline),
    readers: ReadersService = Depends(get_readers_service),
) -> AnalysisResponse:
    files = files or []
    value = parse_threshold(threshold, settings.default_threshold)

    if len(files) < settings.min_documents:
        raise InsufficientDocumentsError(len(files), settings.min_documents)
    if len(files) > settings.max_documents:
        raise TooManyDocumentsError(len(files), settings.max_documents)

    uploads = await read_uploads(files, settings)
    # 文本提取与分析都是 CPU 密集型，放到线程中执行，避免阻塞事件循环
    documents = await asyncio.to_thread(extract_documents, readers, uploads)
    result = await asyncio.to_thread(pipeline.analyze, documents, value)

    return AnalysisResponse.from_result(result)
