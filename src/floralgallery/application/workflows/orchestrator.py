"""
Transaction Orchestrator.

Turns one user action into a sequence of content-store and ledger calls:

- publish: validate -> upload picture -> upload descriptor -> mint x quantity
- purchase / relist / delist / retire: validate -> submit -> confirm

Every workflow runs as a ``Pipeline`` over a ``WorkflowTracker`` and returns a
``WorkflowOutcome`` instead of raising, so partial batch progress is always
visible to the caller. Nothing is retried: a retried mint creates a new
asset.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Awaitable, Callable, List, Optional, Union

from floralgallery.application.ports import (
    ContentPublisherPort,
    LedgerPort,
    SessionGuardPort,
    Submission,
)
from floralgallery.config import MAX_BATCH_QUANTITY, AppConfig
from floralgallery.core.errors import (
    ConfigurationError,
    FloralGalleryError,
    PartialBatchFailure,
    PublicationError,
    UserDeclined,
    ValidationError,
)
from floralgallery.core.pipeline import (
    Pipeline,
    PipelineStage,
    WorkflowProgress,
    WorkflowState,
    WorkflowTracker,
)
from floralgallery.domain import (
    AssetIdentifier,
    AssetPayload,
    Descriptor,
    GalleryEntry,
    PendingTransaction,
    SessionContext,
    to_base_units,
    to_display_units,
)
from floralgallery.domain.units import Amount

from .gallery import Gallery

logger = logging.getLogger(__name__)

MINT = "mint"
PURCHASE = "purchase"
RELIST = "relist"
DELIST = "delist"
RETIRE = "retire"

ProgressCallback = Callable[[WorkflowProgress], None]
ConfirmGate = Callable[[AssetIdentifier], Union[bool, Awaitable[bool]]]


@dataclass
class MintRequest:
    name: str
    description: str
    payload: AssetPayload
    price: Amount
    quantity: int = 1


@dataclass
class WorkflowOutcome:
    kind: str
    state: WorkflowState
    tx_hash: Optional[str] = None
    identifiers: List[AssetIdentifier] = field(default_factory=list)
    completed_count: int = 0
    requested_count: int = 0
    error: Optional[FloralGalleryError] = None
    history: List[WorkflowProgress] = field(default_factory=list)
    transactions: List[PendingTransaction] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state is WorkflowState.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.state is WorkflowState.FAILED

    @property
    def declined(self) -> bool:
        error = self.error
        if isinstance(error, PartialBatchFailure):
            error = error.cause
        return isinstance(error, UserDeclined)

    @property
    def message(self) -> str:
        return self.history[-1].message if self.history else ""

    def raise_for_failure(self) -> None:
        if self.error is not None:
            raise self.error


@dataclass
class _Run:
    """Mutable state of one workflow instance, shared by its stages."""

    session: Optional[SessionContext]
    tracker: WorkflowTracker
    requested: int = 1
    completed: int = 0
    tx_hash: Optional[str] = None
    identifiers: List[AssetIdentifier] = field(default_factory=list)
    transactions: List[PendingTransaction] = field(default_factory=list)
    image_locator: Optional[str] = None
    descriptor_locator: Optional[str] = None
    base_price: int = 0

    def record(self, submission: Submission, step: Optional[int] = None) -> None:
        if self.tx_hash is None:
            self.tx_hash = submission.tx_hash
        self.transactions.append(
            PendingTransaction(submitted_hash=submission.tx_hash, kind=self.tracker.kind, sequence_index=step)
        )


class TransactionOrchestrator:
    def __init__(
        self,
        config: AppConfig,
        guard: SessionGuardPort,
        ledger: Optional[LedgerPort],
        publisher: ContentPublisherPort,
        gallery: Gallery,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.config = config
        self.guard = guard
        self.ledger = ledger
        self.publisher = publisher
        self.gallery = gallery
        self.on_progress = on_progress

    def explorer_url(self, tx_hash: str) -> str:
        return self.config.ledger.explorer_url(tx_hash)

    # ---- workflows ----

    async def publish(
        self,
        session: Optional[SessionContext],
        request: MintRequest,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WorkflowOutcome:
        run = self._new_run(MINT, session, on_progress)

        def check() -> None:
            if (
                not (request.name or "").strip()
                or not (request.description or "").strip()
                or request.payload is None
            ):
                raise ValidationError("Please fill in all fields and select a picture")
            request.payload.validate()
            run.base_price = self._positive_price(request.price)
            quantity = request.quantity
            limit = min(self.config.gallery.max_batch_quantity, MAX_BATCH_QUANTITY)
            if not isinstance(quantity, int) or isinstance(quantity, bool) or not 1 <= quantity <= limit:
                raise ValidationError(f"Quantity must be between 1 and {limit}")
            run.requested = quantity

        async def publish_content(run: _Run) -> None:
            run.image_locator = await self.publisher.publish_asset(request.payload)
            run.tracker.transition(WorkflowState.PUBLISHING, "Saving your picture...")
            descriptor = Descriptor(
                name=request.name.strip(),
                description=request.description.strip(),
                image=run.image_locator,
            )
            run.descriptor_locator = await self.publisher.publish_descriptor(descriptor)

        done = "Your picture has been saved successfully!"
        if request.quantity != 1:
            done = f"Your {request.quantity} pictures have been saved successfully!"

        pipeline = (
            Pipeline(MINT, success_message=done)
            .add_stage(self._validation_stage(check, require_storage=True))
            .add_stage(
                PipelineStage(
                    "publish",
                    publish_content,
                    state=WorkflowState.PUBLISHING,
                    message="Uploading your picture...",
                    error_type=PublicationError,
                )
            )
            .add_stage(PipelineStage("mint", self._mint_copies))
        )
        await pipeline.run(run.tracker, run)

        if run.completed:
            await self.gallery.refresh()
        return self._outcome(run)

    async def purchase(
        self,
        session: Optional[SessionContext],
        entry: GalleryEntry,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WorkflowOutcome:
        run = self._new_run(PURCHASE, session, on_progress)

        def check() -> None:
            if entry is None:
                raise ValidationError("Nothing selected to buy")
            # the price the user saw; the ledger rejects it if it is stale
            run.base_price = entry.price_base_units

        async def submit(run: _Run) -> None:
            await self._submit_single(
                run, lambda: self.ledger.purchase(run.session, entry.identifier, run.base_price)
            )

        await self._run_single(run, check, submit, "Purchase complete!")
        if run.completed:
            await self.gallery.refresh()
        return self._outcome(run)

    async def relist(
        self,
        session: Optional[SessionContext],
        identifier: AssetIdentifier,
        new_price: Amount,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WorkflowOutcome:
        run = self._new_run(RELIST, session, on_progress)

        def check() -> None:
            run.base_price = self._positive_price(new_price)

        async def submit(run: _Run) -> None:
            await self._submit_single(run, lambda: self.ledger.relist(run.session, identifier, run.base_price))

        await self._run_single(run, check, submit, "Listed for sale!")
        if run.completed:
            self.gallery.patch_price(identifier, to_display_units(run.base_price))
        return self._outcome(run)

    async def delist(
        self,
        session: Optional[SessionContext],
        identifier: AssetIdentifier,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WorkflowOutcome:
        run = self._new_run(DELIST, session, on_progress)

        async def submit(run: _Run) -> None:
            await self._submit_single(run, lambda: self.ledger.delist(run.session, identifier))

        await self._run_single(run, None, submit, "Removed from sale.")
        if run.completed:
            await self.gallery.refresh()
        return self._outcome(run)

    async def retire(
        self,
        session: Optional[SessionContext],
        identifier: AssetIdentifier,
        confirm: ConfirmGate,
        on_progress: Optional[ProgressCallback] = None,
    ) -> WorkflowOutcome:
        run = self._new_run(RETIRE, session, on_progress)

        async def submit(run: _Run) -> None:
            try:
                answer = confirm(identifier)
                if inspect.isawaitable(answer):
                    answer = await answer
            except FloralGalleryError:
                raise
            except Exception as exc:  # noqa: BLE001
                raise ValidationError(
                    message="Could not confirm retiring; nothing was submitted",
                    context={"exception": type(exc).__name__},
                ) from exc
            if not answer:
                raise UserDeclined("Retiring was cancelled; nothing was submitted")
            await self._submit_single(run, lambda: self.ledger.retire(run.session, identifier))

        await self._run_single(run, None, submit, "Picture retired.")
        if run.completed:
            await self.gallery.refresh()
        return self._outcome(run)

    # ---- stages ----

    def _new_run(
        self,
        kind: str,
        session: Optional[SessionContext],
        on_progress: Optional[ProgressCallback],
    ) -> _Run:
        return _Run(session=session, tracker=WorkflowTracker(kind, on_progress or self.on_progress))

    def _validation_stage(
        self,
        check: Optional[Callable[[], None]],
        *,
        require_storage: bool = False,
    ) -> PipelineStage:
        async def validate(run: _Run) -> None:
            session = run.session
            if session is None or not session.identity:
                raise ValidationError("Please connect your wallet first")
            if not self.guard.is_current(session):
                raise ValidationError("Your account or network changed. Please reconnect and try again.")

            if check is not None:
                check()

            missing = self.config.missing(require_storage=require_storage)
            if missing:
                if "ledger.contract_address" in missing:
                    message = "Contract address not configured. Please contact the administrator."
                else:
                    message = "Storage service not configured. Please contact the administrator."
                raise ConfigurationError(message=message, context={"missing": missing})
            if self.ledger is None:
                raise ConfigurationError("Ledger client not available. Please contact the administrator.")

            if not await self.guard.require_network(self.config.ledger.chain_id):
                raise ValidationError(f"Please switch to {self.config.ledger.chain_name.title()} network")

        return PipelineStage("validate", validate, state=WorkflowState.VALIDATING, message="Checking...")

    async def _run_single(
        self,
        run: _Run,
        check: Optional[Callable[[], None]],
        submit: Callable[[_Run], Awaitable[None]],
        done: str,
    ) -> None:
        pipeline = (
            Pipeline(run.tracker.kind, success_message=done)
            .add_stage(self._validation_stage(check))
            .add_stage(PipelineStage("submit", submit))
        )
        await pipeline.run(run.tracker, run)

    async def _submit_single(self, run: _Run, send: Callable[[], Awaitable[Submission]]) -> None:
        run.tracker.transition(WorkflowState.SUBMITTING, "Processing...")
        submission = await send()
        run.record(submission)
        run.tracker.transition(
            WorkflowState.AWAITING_CONFIRMATION, "Waiting for confirmation...", tx_hash=submission.tx_hash
        )
        await submission.wait()
        run.completed = 1

    async def _mint_copies(self, run: _Run) -> None:
        """Mint ``run.requested`` copies strictly one after another."""
        total = run.requested
        for step in range(1, total + 1):
            label = "Processing..." if total == 1 else f"Processing copy {step} of {total}..."
            run.tracker.transition(WorkflowState.SUBMITTING, label, step=step, total=total)
            try:
                submission = await self.ledger.mint(run.session, run.descriptor_locator, run.base_price)
                run.record(submission, step)
                run.tracker.transition(
                    WorkflowState.AWAITING_CONFIRMATION,
                    "Waiting for confirmation...",
                    step=step,
                    total=total,
                    tx_hash=submission.tx_hash,
                )
                confirmation = await submission.wait()
            except FloralGalleryError as exc:
                if run.completed:
                    raise PartialBatchFailure.after(run.completed, total, exc) from exc
                raise
            except Exception as exc:  # noqa: BLE001
                if not run.completed:
                    raise
                cause = FloralGalleryError(
                    message=str(exc) or type(exc).__name__,
                    code="UNEXPECTED_ERROR",
                    context={"exception": type(exc).__name__},
                )
                raise PartialBatchFailure.after(run.completed, total, cause) from exc

            run.completed += 1
            if confirmation.identifier is not None:
                run.identifiers.append(confirmation.identifier)

    # ---- helpers ----

    @staticmethod
    def _positive_price(price: Any) -> int:
        if price is None or (isinstance(price, str) and not price.strip()):
            raise ValidationError("Please enter a price")
        base = to_base_units(price if isinstance(price, (Decimal, int, str)) else str(price))
        if base <= 0:
            raise ValidationError("Price must be greater than zero")
        return base

    @staticmethod
    def _outcome(run: _Run) -> WorkflowOutcome:
        return WorkflowOutcome(
            kind=run.tracker.kind,
            state=run.tracker.state,
            tx_hash=run.tx_hash,
            identifiers=list(run.identifiers),
            completed_count=run.completed,
            requested_count=run.requested,
            error=run.tracker.error,
            history=list(run.tracker.history),
            transactions=list(run.transactions),
        )
