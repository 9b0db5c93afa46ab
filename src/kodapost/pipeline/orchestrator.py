"""Generation pipeline orchestrator.

Drives one job through the stages in order, writing the job row after
each one:
1. Analyze each uploaded image (non-fatal)
2. Generate styled slides with text overlays (fatal)
3. Composite ready slides into export images (fatal)
4. Generate the caption (non-fatal)
5. Store the result

The caller observes the job only through the Job Store. ``run_job`` never
raises: every failure ends as a ``failed`` row.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Sequence, TypeVar

from ..constants import PROGRESS_DONE, JobStatus, PipelineStep
from ..jobs.models import CompositedSlide, GenerationResult
from ..jobs.service import GenerateConfig
from ..jobs.store import JobNotFoundError, JobStore
from .contracts import (
    Analyzer,
    Captioner,
    CarouselDraft,
    Compositor,
    GeneratedSlide,
    Generator,
    UploadedImage,
    map_to_carousel_project,
)
from .stages import (
    ANALYZE,
    CAPTION,
    COMPOSITE,
    GENERATE,
    GENERATION_FAILED_ERROR,
    NO_READY_SLIDES_ERROR,
    PipelineStage,
    StageFailed,
)

_logger = logging.getLogger("pipeline")

T = TypeVar("T")


class GenerationOrchestrator:
    """Runs the generation pipeline for a single job at a time.

    Holds no per-job state between calls, so one instance can serve many
    concurrent jobs. A job id may be run only once; retries need a new job.

    Usage:
        orchestrator = GenerationOrchestrator(
            store=store,
            analyzer=analyzer,
            generator=generator,
            compositor=compositor,
            captioner=captioner,
        )
        await orchestrator.run_job(job.id, config, images)
        job = store.get(job.id)
    """

    def __init__(
        self,
        store: JobStore,
        analyzer: Analyzer,
        generator: Generator,
        compositor: Compositor,
        captioner: Captioner,
    ):
        self.store = store
        self.analyzer = analyzer
        self.generator = generator
        self.compositor = compositor
        self.captioner = captioner

    async def run_job(
        self,
        job_id: str,
        config: GenerateConfig,
        images: Sequence[UploadedImage],
    ) -> None:
        """Run every stage for a pending job and record the outcome."""
        try:
            job = self.store.get(job_id)
        except JobNotFoundError:
            _logger.error(f"JOB:{job_id} | RUN_SKIPPED | reason:not found")
            return
        except Exception as e:
            # Corrupt or unreadable row
            _logger.exception(f"JOB:{job_id} | RUN_SKIPPED | reason:unreadable | error:{e}")
            return

        if job.status != JobStatus.PENDING:
            _logger.error(
                f"JOB:{job_id} | RUN_SKIPPED | reason:already {job.status.value}"
            )
            return

        _logger.info(
            f"JOB:{job_id} | PIPELINE_START | images:{len(images)} | "
            f"platforms:{','.join(config.platforms)}"
        )

        try:
            self._update(
                job_id,
                status=JobStatus.PROCESSING,
                started_at=self.store.now(),
            )

            await self._analyze(job_id, images)
            draft = await self._generate(job_id, config, images)
            ready_slides, composited = await self._composite(job_id, config, draft)
            caption = await self._caption(job_id, config)

            result = GenerationResult(
                caption=caption,
                slides=tuple(composited),
                slide_count=len(ready_slides),
                platforms=tuple(config.platforms),
            )
            self._update(
                job_id,
                status=JobStatus.COMPLETED,
                result=result,
                progress=PROGRESS_DONE,
                current_step=PipelineStep.DONE,
                completed_at=self.store.now(),
            )
            _logger.info(
                f"JOB:{job_id} | PIPELINE_DONE | slides:{result.slide_count} | "
                f"images:{len(result.slides)} | caption:{caption is not None}"
            )

        except StageFailed as e:
            _logger.error(f"JOB:{job_id} | STAGE_FAILED | stage:{e.stage.step.value} | error:{e}")
            self._record_failure(job_id, str(e))

        except Exception as e:
            message = str(e) or GENERATION_FAILED_ERROR
            _logger.exception(f"JOB:{job_id} | PIPELINE_ERROR | error:{message}")
            self._record_failure(job_id, message)

    # =========================================================================
    # Stages
    # =========================================================================

    async def _analyze(self, job_id: str, images: Sequence[UploadedImage]) -> None:
        """Attach an analysis to each image that can be analyzed."""
        self._enter(job_id, ANALYZE)

        total = len(images)
        for index, image in enumerate(images):
            image.analysis = await self._attempt(
                job_id, ANALYZE, self.analyzer.analyze, image, context=f"image:{image.filename}"
            )
            self._update(job_id, progress=ANALYZE.progress_at(index + 1, total))

    async def _generate(
        self,
        job_id: str,
        config: GenerateConfig,
        images: Sequence[UploadedImage],
    ) -> CarouselDraft:
        self._enter(job_id, GENERATE)

        project = map_to_carousel_project(config, images)
        draft = await self._attempt(job_id, GENERATE, self.generator.generate, project)

        self._update(job_id, progress=GENERATE.progress_end)
        return draft

    async def _composite(
        self,
        job_id: str,
        config: GenerateConfig,
        draft: CarouselDraft,
    ) -> tuple[list[GeneratedSlide], list[CompositedSlide]]:
        self._enter(job_id, COMPOSITE)

        ready_slides = [slide for slide in draft.slides if slide.is_ready]
        if not ready_slides:
            raise StageFailed(COMPOSITE, NO_READY_SLIDES_ERROR)

        composited = await self._attempt(
            job_id,
            COMPOSITE,
            self.compositor.composite,
            ready_slides,
            list(config.platforms),
            draft.filter_config,
        )
        if composited is None:
            composited = []

        self._update(job_id, progress=COMPOSITE.progress_end)
        return ready_slides, list(composited)

    async def _caption(self, job_id: str, config: GenerateConfig) -> str | None:
        self._enter(job_id, CAPTION)
        return await self._attempt(
            job_id, CAPTION, self.captioner.caption, config.theme, list(config.keywords)
        )

    async def _attempt(
        self,
        job_id: str,
        stage: PipelineStage,
        call: Callable[..., Awaitable[T]],
        *args: Any,
        context: str = "",
    ) -> T | None:
        """Await a collaborator call and apply the stage's failure policy.

        A fatal stage turns the error into StageFailed. A non-fatal stage
        logs it and yields None.
        """
        try:
            return await call(*args)
        except Exception as e:
            if stage.is_fatal:
                raise StageFailed(stage, str(e) or stage.failure_message) from e
            detail = f" | {context}" if context else ""
            _logger.warning(
                f"JOB:{job_id} | STAGE_DEGRADED | stage:{stage.step.value}{detail} | error:{e}"
            )
            return None

    # =========================================================================
    # Job row helpers
    # =========================================================================

    def _enter(self, job_id: str, stage: PipelineStage) -> None:
        _logger.info(f"JOB:{job_id} | STAGE_START | stage:{stage.step.value} | kind:{stage.kind.value}")
        self._update(job_id, current_step=stage.step, progress=stage.progress_start)

    def _update(self, job_id: str, **fields: Any) -> None:
        self.store.update(job_id, **fields)

    def _record_failure(self, job_id: str, message: str) -> None:
        """Mark the job failed. Best effort: a store error is only logged."""
        try:
            self.store.update(
                job_id,
                status=JobStatus.FAILED,
                error=message,
                completed_at=self.store.now(),
            )
        except Exception as e:
            _logger.error(f"JOB:{job_id} | FAILURE_NOT_RECORDED | error:{e}")
