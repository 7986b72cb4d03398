#!/usr/bin/env python3

"""Enum extensions generator orchestrator (Application Layer).

One call to supply() is one pass over a program snapshot:
- SyntaxProvider: parsing and the syntactic candidate filter
- SemanticResolver: opt-in marker confirmation
- MetadataExtractor: description records
- DescriptionCache: cross-pass reuse of records and outputs
- Emitter: source text for each record
"""

from dataclasses import replace

from ...domain.models import DeclarationNode, Diagnostic, EnumToGenerate, OutputUnit, ProgramSnapshot
from ...domain.repositories.cache import DescriptionCache
from ...domain.services.generation import (
    Emitter,
    ExtensionEmitter,
    MetadataExtractor,
    SemanticResolver,
    with_marker_module,
)
from ...domain.services.parsing import SymbolTable, SyntaxProvider
from ...infrastructure.config import get_config
from ...infrastructure.logging import ProgressTracker, get_logger, log_timing
from ..cancellation import CancellationToken, PassCancelledError

logger = get_logger(__name__)

DIAGNOSTIC_SYMBOL_UNAVAILABLE = "EEG001"
DIAGNOSTIC_DUPLICATE_HINT_NAME = "EEG002"


class EnumGenerator:
    """Pull-based pipeline: ``supply(snapshot) -> list[OutputUnit]``.

    The generator is stateless per pass apart from its DescriptionCache and
    the parsed-tree cache of its SyntaxProvider. Passes must not run
    concurrently on the same instance.
    """

    def __init__(
        self,
        emitter: Emitter | None = None,
        cache: DescriptionCache | None = None,
        parse_cache_size: int | None = None,
        inject_marker_module: bool | None = None,
    ):
        """Initialize the pipeline components.

        Args:
            emitter: Renders records; defaults to ExtensionEmitter
            cache: Cross-pass description cache; a fresh one by default
            parse_cache_size: Parsed trees kept between passes (config default)
            inject_marker_module: Add the marker module to every snapshot (config default)
        """
        config = get_config()
        self.emitter: Emitter = emitter if emitter is not None else ExtensionEmitter()
        self.cache = cache if cache is not None else DescriptionCache()
        self.syntax_provider = SyntaxProvider(
            cache_size=parse_cache_size if parse_cache_size is not None else config["PARSE_CACHE_SIZE"]
        )
        self.resolver = SemanticResolver()
        self.extractor = MetadataExtractor()
        self.inject_marker_module = (
            inject_marker_module
            if inject_marker_module is not None
            else config["INJECT_MARKER_MODULE"]
        )
        self.diagnostics: list[Diagnostic] = []

    @log_timing
    def supply(
        self, snapshot: ProgramSnapshot, cancellation: CancellationToken | None = None
    ) -> list[OutputUnit]:
        """Run one pass over a program snapshot.

        Args:
            snapshot: Program files for this pass
            cancellation: Token polled between candidates

        Returns:
            One output unit per distinct description record; units whose
            record equals the previous pass's carry ``reused=True`` and were
            not re-emitted

        Raises:
            PassCancelledError: If cancellation was requested; nothing is
                dispatched and the previous pass's cache stays in effect
        """
        tracker = ProgressTracker(logger)
        diagnostics: list[Diagnostic] = []
        token = cancellation if cancellation is not None else CancellationToken()

        self.cache.begin_pass()
        try:
            outputs = self._run_pass(snapshot, token, tracker, diagnostics)
        except PassCancelledError:
            logger.info("Pass cancelled; keeping results of the previous pass")
            self.cache.discard()
            raise
        except Exception:
            self.cache.discard()
            raise

        self.cache.commit()
        self.diagnostics = diagnostics
        tracker.report_summary()
        tracker.log_memory_usage()
        return outputs

    def _run_pass(
        self,
        snapshot: ProgramSnapshot,
        cancellation: CancellationToken,
        tracker: ProgressTracker,
        diagnostics: list[Diagnostic],
    ) -> list[OutputUnit]:
        if self.inject_marker_module:
            snapshot = with_marker_module(snapshot)

        with tracker.track_operation("parse"):
            parsed = self.syntax_provider.parse(snapshot)
            candidates = list(self.syntax_provider.iter_candidates(parsed))

        if not candidates:
            logger.debug("No syntactic candidates; nothing to generate")
            return []

        cancellation.raise_if_cancelled()
        with tracker.track_operation("resolve"):
            symbol_table = SymbolTable(parsed)
            resolved = self.resolver.resolve_all(candidates, symbol_table)

        if not resolved:
            logger.debug("No declaration carries the opt-in marker")
            return []

        with tracker.track_operation("extract"):
            return self._generate(resolved, symbol_table, cancellation, tracker, diagnostics)

    def _generate(
        self,
        declarations: list[DeclarationNode],
        symbol_table: SymbolTable,
        cancellation: CancellationToken,
        tracker: ProgressTracker,
        diagnostics: list[Diagnostic],
    ) -> list[OutputUnit]:
        outputs: list[OutputUnit] = []
        claimed: dict[str, tuple[DeclarationNode, EnumToGenerate]] = {}

        def reuse(identity: str, inputs: object) -> EnumToGenerate | None:
            previous = self.cache.lookup_record(identity, inputs)
            if previous is None:
                tracker.count_extracted()
            return previous

        for declaration in declarations:
            cancellation.raise_if_cancelled()
            tracker.count_candidate()

            record = self.extractor.extract(declaration, symbol_table, reuse=reuse)
            inputs = self.extractor.inputs(declaration, symbol_table)
            if record is None or inputs is None:
                self._report(
                    diagnostics,
                    tracker,
                    Diagnostic(
                        code=DIAGNOSTIC_SYMBOL_UNAVAILABLE,
                        message=f"No enum symbol for {declaration.qualname}; declaration skipped",
                        path=declaration.path,
                        line=declaration.line,
                    ),
                )
                continue

            if record.hint_name in claimed:
                owner, owner_record = claimed[record.hint_name]
                if owner_record == record:
                    logger.debug(f"{declaration.identity} coalesced with {owner.identity}")
                else:
                    self._report(
                        diagnostics,
                        tracker,
                        Diagnostic(
                            code=DIAGNOSTIC_DUPLICATE_HINT_NAME,
                            message=(
                                f"Output {record.hint_name} already produced for "
                                f"{owner.qualname}; {declaration.qualname} skipped"
                            ),
                            path=declaration.path,
                            line=declaration.line,
                        ),
                    )
                continue
            claimed[record.hint_name] = (declaration, record)

            output = self._dispatch(declaration.identity, record, tracker)
            self.cache.stage(declaration.identity, inputs, record, output)
            outputs.append(output)

        return outputs

    def _dispatch(self, identity: str, record: EnumToGenerate, tracker: ProgressTracker) -> OutputUnit:
        """Emit a record, or reuse the previous output when the record is unchanged."""
        previous = self.cache.lookup_output(identity, record)
        if previous is not None:
            tracker.count_reused()
            logger.debug(f"{record.hint_name} unchanged; reusing previous output")
            return replace(previous, reused=True)

        text = self.emitter.emit(record)
        logger.debug(f"Emitted {record.hint_name} ({len(text)} bytes)")
        return OutputUnit(
            hint_name=record.hint_name,
            namespace=record.namespace,
            text=text,
            record=record,
        )

    @staticmethod
    def _report(diagnostics: list[Diagnostic], tracker: ProgressTracker, diagnostic: Diagnostic) -> None:
        logger.warning(str(diagnostic))
        diagnostics.append(diagnostic)
        tracker.count_skipped()
