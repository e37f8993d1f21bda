"""Composable stages for sentence-level multi-document similarity analysis."""
from __future__ import annotations

import uuid
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from docsim.core.config import Settings
from docsim.core.errors import BaseApplicationError, InsufficientDocumentsError
from docsim.core.logging import LogEvent
from docsim.models.analysis import (
    AnalysisMetadata,
    AnalysisResult,
    Document,
    DocumentPairScore,
    Sentence,
    SentenceMatch,
    TermVector,
)
from docsim.services.base_service import BaseService
from docsim.services.match_aggregator import aggregate_pair_scores, filter_and_sort
from docsim.services.pipeline_metrics import PipelineMetrics
from docsim.services.similarity_engine import PairSimilarity, PairwiseSimilarityEngine
from docsim.services.text_processor import TextProcessor
from docsim.services.tfidf import IdfTable, compute_idf, compute_tf, vectorize

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class PipelineContext:
    documents: List[Document]
    sentences: List[Sentence]
    threshold: float
    metrics: PipelineMetrics
    executor: Optional[Executor] = None
    tf_maps: List[Dict[str, float]] = field(default_factory=list)
    idf: Optional[IdfTable] = None
    vectors: List[TermVector] = field(default_factory=list)
    similarities: List[PairSimilarity] = field(default_factory=list)
    matches: List[SentenceMatch] = field(default_factory=list)
    pair_scores: List[DocumentPairScore] = field(default_factory=list)

    def parallel_map(self, func: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """Order-preserving map over the run's executor (serial when there is none)."""
        if self.executor is None:
            return [func(item) for item in items]
        return list(self.executor.map(func, items))


class PipelineStage:
    name = "stage"

    def run(self, context: PipelineContext) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class TermFrequencyStage(PipelineStage):
    """Normalize, tokenize and count terms per sentence."""

    name = "term_frequency"

    def run(self, context: PipelineContext) -> None:
        with context.metrics.stage(self.name, items_in=len(context.sentences)) as stage:
            context.tf_maps = context.parallel_map(
                lambda sentence: compute_tf(TextProcessor.prepare_tokens(sentence.text)),
                context.sentences,
            )
            stage.items_out = len(context.tf_maps)


class InverseDocumentFrequencyStage(PipelineStage):
    """The only barrier: needs every sentence's TF map before anything can be scored."""

    name = "inverse_document_frequency"

    def run(self, context: PipelineContext) -> None:
        with context.metrics.stage(self.name, items_in=len(context.tf_maps)) as stage:
            context.idf = compute_idf(context.tf_maps)
            stage.items_out = len(context.idf)


class VectorizeStage(PipelineStage):
    name = "vectorize"

    def run(self, context: PipelineContext) -> None:
        idf = context.idf
        if idf is None:
            raise RuntimeError("IDF table must be computed before vectorizing")

        def build(position: int) -> TermVector:
            sentence = context.sentences[position]
            return vectorize(sentence.doc_index, sentence.index, context.tf_maps[position], idf)

        with context.metrics.stage(self.name, items_in=len(context.tf_maps)) as stage:
            context.vectors = context.parallel_map(build, range(len(context.sentences)))
            stage.items_out = len(context.vectors)


class PairwiseSimilarityStage(PipelineStage):
    name = "pairwise_similarity"

    def run(self, context: PipelineContext) -> None:
        with context.metrics.stage(self.name, items_in=len(context.vectors)) as stage:
            engine = PairwiseSimilarityEngine(context.executor, min_similarity=context.threshold)
            context.similarities = engine.compare(context.vectors)
            stage.items_out = len(context.similarities)


class ThresholdFilterStage(PipelineStage):
    name = "threshold_filter"

    def run(self, context: PipelineContext) -> None:
        with context.metrics.stage(self.name, items_in=len(context.similarities)) as stage:
            context.matches = filter_and_sort(
                context.similarities,
                context.sentences,
                context.documents,
                context.threshold,
            )
            # pair scores are no longer needed once matches exist
            context.similarities = []
            stage.items_out = len(context.matches)


class AggregationStage(PipelineStage):
    name = "aggregation"

    def run(self, context: PipelineContext) -> None:
        with context.metrics.stage(self.name, items_in=len(context.matches)) as stage:
            context.pair_scores = aggregate_pair_scores(context.matches)
            stage.items_out = len(context.pair_scores)


class SimilarityPipeline(BaseService):
    """
    Runs the analysis stages for one request.

    Documents are split and validated up front; both error kinds surface before
    any parallel work is scheduled. Every intermediate lives in a per-call
    PipelineContext, so concurrent requests never share state.
    """

    def __init__(self, settings: Optional[Settings] = None, max_workers: Optional[int] = None):
        super().__init__(settings)
        self.max_workers = max_workers if max_workers is not None else self.settings.max_workers
        self.text_processor = TextProcessor(self.settings)
        self.stages: List[PipelineStage] = [
            TermFrequencyStage(),
            InverseDocumentFrequencyStage(),
            VectorizeStage(),
            PairwiseSimilarityStage(),
            ThresholdFilterStage(),
            AggregationStage(),
        ]

    def analyze(
        self,
        documents: Sequence[Tuple[str, str]],
        threshold: Optional[float] = None,
    ) -> AnalysisResult:
        """
        Analyze ``(label, raw text)`` pairs in upload order.

        Raises:
            InsufficientDocumentsError: fewer than ``min_documents`` documents
            EmptyDocumentError: a document yields no sentences
        """
        threshold = self.settings.default_threshold if threshold is None else threshold
        metrics = PipelineMetrics(pipeline_id=uuid.uuid4().hex[:12])
        log = self.logger.bind(pipeline_id=metrics.pipeline_id)

        try:
            built = self._build_documents(documents)
        except BaseApplicationError as exc:
            log.warning(LogEvent.ANALYSIS_FAILED, error_code=exc.error_code.value, error=exc.message)
            raise

        sentences = [sentence for document in built for sentence in document.sentences]
        log.info(
            LogEvent.ANALYSIS_STARTED,
            documents=len(built),
            sentences=len(sentences),
            threshold=threshold,
        )

        with self._executor() as executor:
            context = PipelineContext(
                documents=built,
                sentences=sentences,
                threshold=threshold,
                metrics=metrics,
                executor=executor,
            )
            for stage in self.stages:
                stage.run(context)

        metrics.finish()
        result = AnalysisResult(
            metadata=AnalysisMetadata(
                documents_count=len(built),
                total_sentences=len(sentences),
                processing_time_ms=metrics.elapsed_ms,
                threshold=threshold,
            ),
            matches=context.matches,
            global_similarity=context.pair_scores,
        )
        log.info(
            LogEvent.ANALYSIS_COMPLETED,
            matches=len(result.matches),
            document_pairs=len(result.global_similarity),
            processing_time_ms=result.metadata.processing_time_ms,
        )
        return result

    def analyze_texts(self, texts: Sequence[str], threshold: Optional[float] = None) -> AnalysisResult:
        """Analyze unlabelled texts, naming them ``doc0``, ``doc1``, ..."""
        return self.analyze([(f"doc{i}", text) for i, text in enumerate(texts)], threshold)

    def _build_documents(self, documents: Sequence[Tuple[str, str]]) -> List[Document]:
        minimum = self.settings.min_documents
        if len(documents) < minimum:
            raise InsufficientDocumentsError(len(documents), minimum)
        return [
            self.text_processor.build_document(index, label, text)
            for index, (label, text) in enumerate(documents)
        ]

    def _executor(self):
        if self.max_workers == 1:
            return nullcontext(None)
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="docsim")
