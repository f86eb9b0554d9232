"""Extraction orchestration: resolver selection, per-image dispatch and merge."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from extractpoints.async_runner import bounded_to_thread, gather_ordered, run_async
from extractpoints.exceptions import AsyncExecutionError, MissingOcrResultError
from extractpoints.logging import bound_run_context, get_logger
from extractpoints.processing.merge import merge_contents
from extractpoints.settings import Settings, get_settings
from extractpoints.typing.models import Content, ResolveContext

if TYPE_CHECKING:
    from collections.abc import Sequence

    from extractpoints.resolvers.registry import ResolverRegistry
    from extractpoints.typing.models import CheckpointConfig, ExtractionPoint, Image, OcrOutput
    from extractpoints.typing.protocol import Resolver

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PointPlan:
    """Dispatch plan of one extraction point.

    A plan either carries a ``placeholder`` (nothing to dispatch), a
    ``failure`` (an image lacks its OCR result), or the resolver and its
    per-image ``contexts`` in filtered image order.
    """

    point: ExtractionPoint
    resolver: Resolver | None = None
    contexts: tuple[ResolveContext, ...] = ()
    placeholder: Content | None = None
    failure: MissingOcrResultError | None = None


class ExtractionOrchestrator:
    """Run the registered resolvers over a form type's extraction points."""

    def __init__(self, registry: ResolverRegistry, *, settings: Settings | None = None) -> None:
        """Initialize the orchestrator.

        Args:
            registry (ResolverRegistry): Resolvers available for lookup.
            settings (Settings | None): Runtime settings, defaults to `get_settings()`.
        """
        self._registry = registry
        self._settings = settings or get_settings()

    @property
    def registry(self) -> ResolverRegistry:
        """Return the resolver registry."""
        return self._registry

    def find_resolver(self, point: ExtractionPoint) -> Resolver | None:
        """Return the first registered resolver supporting the point.

        Args:
            point (ExtractionPoint): Extraction point to route.

        Returns:
            Resolver | None: Selected resolver, or None.
        """
        return self._registry.find(point)

    def parse(
        self,
        images: Sequence[Image],
        ocr_outputs: Sequence[OcrOutput],
        checkpoint: CheckpointConfig,
    ) -> list[Content]:
        """Extract one content per configured extraction point.

        Runs sequentially unless ``resolver_concurrency`` is above 1, in which
        case the work is delegated to `aparse`. Errors raised there propagate
        unchanged, from a running event loop too.

        Args:
            images (Sequence[Image]): Classified images of the form type.
            ocr_outputs (Sequence[OcrOutput]): OCR results, matched to images by id.
            checkpoint (CheckpointConfig): Form type configuration.

        Raises:
            MissingOcrResultError: If an image has no OCR result and isolation is disabled.

        Returns:
            list[Content]: Contents in configuration order.
        """
        if self._settings.resolver_concurrency > 1:
            try:
                return run_async(self.aparse(images, ocr_outputs, checkpoint))
            except AsyncExecutionError as exc:
                # Called from a running loop: surface the resolver or OCR error itself.
                raise exc.result from None

        contents: list[Content] = []
        with bound_run_context(form_type_id=checkpoint.form_type_id):
            for point in checkpoint.extract_point:
                plan = self.plan(point, images, ocr_outputs, checkpoint)
                settled = self._settle(plan)
                if settled is not None:
                    contents.append(settled)
                    continue
                per_image = [self._resolve_one(plan.resolver, context) for context in plan.contexts]
                contents.append(merge_contents(per_image, point))
        return contents

    async def aparse(
        self,
        images: Sequence[Image],
        ocr_outputs: Sequence[OcrOutput],
        checkpoint: CheckpointConfig,
    ) -> list[Content]:
        """Concurrent variant of `parse`.

        Resolver calls of every point and image run in worker threads, at most
        ``resolver_concurrency`` at a time. Results keep configuration order and
        each point folds its images in filtered order.

        Args:
            images (Sequence[Image]): Classified images of the form type.
            ocr_outputs (Sequence[OcrOutput]): OCR results, matched to images by id.
            checkpoint (CheckpointConfig): Form type configuration.

        Raises:
            MissingOcrResultError: If an image has no OCR result and isolation is disabled.

        Returns:
            list[Content]: Contents in configuration order.
        """
        semaphore = asyncio.Semaphore(self._settings.resolver_concurrency)

        async def _run_plan(plan: PointPlan) -> Content:
            settled = self._settle(plan)
            if settled is not None:
                return settled
            per_image = await gather_ordered(
                bounded_to_thread(semaphore, self._resolve_one, plan.resolver, context)
                for context in plan.contexts
            )
            return merge_contents(per_image, plan.point)

        with bound_run_context(form_type_id=checkpoint.form_type_id):
            plans = [self.plan(point, images, ocr_outputs, checkpoint) for point in checkpoint.extract_point]
            return await gather_ordered(_run_plan(plan) for plan in plans)

    def plan(
        self,
        point: ExtractionPoint,
        images: Sequence[Image],
        ocr_outputs: Sequence[OcrOutput],
        checkpoint: CheckpointConfig,
    ) -> PointPlan:
        """Select the resolver and the images to dispatch for one point.

        Planning never raises: a missing OCR result is recorded on the plan.

        Args:
            point (ExtractionPoint): Extraction point.
            images (Sequence[Image]): Classified images of the form type.
            ocr_outputs (Sequence[OcrOutput]): OCR results.
            checkpoint (CheckpointConfig): Form type configuration.

        Returns:
            PointPlan: Dispatch plan.
        """
        form_type_id = checkpoint.form_type_id
        if not images:
            logger.error(
                "No classified image for form type",
                extra={"form_type_id": form_type_id, "document_field": point.document_field},
            )
            return PointPlan(point=point, placeholder=Content.of("", point))

        resolver = self.find_resolver(point)
        if resolver is None:
            logger.error(
                "No resolver supports extraction point, check checkpoint configuration",
                extra={"form_type_id": form_type_id, "document_field": point.document_field},
            )
            return PointPlan(point=point, placeholder=Content.of("", point))

        all_images = tuple(images)
        contexts: list[ResolveContext] = []
        for image in images:
            if image.document_page != point.page:
                continue
            ocr = _find_ocr_output(image, ocr_outputs)
            if ocr is None:
                failure = MissingOcrResultError(
                    image_id=image.image_id,
                    form_type_id=form_type_id,
                    document_field=point.document_field,
                )
                return PointPlan(point=point, resolver=resolver, failure=failure)
            contexts.append(
                ResolveContext(
                    image=image,
                    ocr=ocr,
                    point=point,
                    images=all_images,
                    form_type_id=form_type_id,
                ),
            )
        return PointPlan(point=point, resolver=resolver, contexts=tuple(contexts))

    def _settle(self, plan: PointPlan) -> Content | None:
        """Resolve plans that need no dispatch.

        Args:
            plan (PointPlan): Dispatch plan.

        Raises:
            MissingOcrResultError: If the plan failed and isolation is disabled.

        Returns:
            Content | None: Final content for the point, or None when images must be dispatched.
        """
        if plan.placeholder is not None:
            return plan.placeholder
        if plan.failure is None:
            return None
        if not self._settings.isolate_missing_ocr:
            raise plan.failure

        logger.error(
            "OCR result missing, extraction point skipped",
            extra={
                "form_type_id": plan.failure.form_type_id,
                "document_field": plan.failure.document_field,
                "image_id": plan.failure.image_id,
            },
        )
        return Content.of("", plan.point, error=str(plan.failure))

    @staticmethod
    def _resolve_one(resolver: Resolver, context: ResolveContext) -> Content:
        """Invoke the resolver for one image, falling back to the image id.

        Args:
            resolver (Resolver): Selected resolver.
            context (ResolveContext): Resolver context.

        Returns:
            Content: Resolver content, or a placeholder holding the image id.
        """
        content = resolver.resolve(context)
        if content is None:
            logger.error(
                "Extraction failed for image",
                extra={
                    "form_type_id": context.form_type_id,
                    "document_field": context.point.document_field,
                    "image_id": context.image.image_id,
                },
            )
            return Content.of(context.image.image_id, context.point)
        return content


def _find_ocr_output(image: Image, ocr_outputs: Sequence[OcrOutput]) -> OcrOutput | None:
    """Return the OCR result whose image name matches the image id.

    Args:
        image (Image): Classified image.
        ocr_outputs (Sequence[OcrOutput]): OCR results.

    Returns:
        OcrOutput | None: Matching OCR result, or None.
    """
    return next((ocr for ocr in ocr_outputs if ocr.image_name == image.image_id), None)
