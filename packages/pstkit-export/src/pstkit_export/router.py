"""ExportRouter -- orchestrator and public API for pstkit-export.

Routes records through: pre-flight scan, composition (EML or vCard),
content hashing, and optional file output.
"""

from __future__ import annotations

import hashlib
import logging
import time
import uuid
from pathlib import Path

from pstkit_core.protocols import BoundaryFactory, Clock

from pstkit_export.composer import EmlComposer
from pstkit_export.config import ConversionOptions
from pstkit_export.errors import ConvertError, ConvertException, ErrorCode, SourceReadError
from pstkit_export.models import ContactRecord, ExportKind, ExportResult, MessageRecord
from pstkit_export.security import RecordScanner
from pstkit_export.sources.msg import MSGSource
from pstkit_export.vcard import VCardComposer

logger = logging.getLogger("pstkit_export")

_SUFFIXES = {ExportKind.EML: ".eml", ExportKind.VCARD: ".vcf"}


class ExportRouter:
    """Top-level orchestrator for record export.

    Parameters
    ----------
    options:
        Conversion options. Uses defaults when *None*.
    boundaries:
        Boundary source handed to the EML composer.
    clock:
        Fallback ``Date`` source handed to the EML composer.
    """

    def __init__(
        self,
        options: ConversionOptions | None = None,
        boundaries: BoundaryFactory | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._options = options or ConversionOptions()
        self._scanner = RecordScanner(self._options)
        self._eml_composer = EmlComposer(self._options, boundaries, clock)
        self._vcard_composer = VCardComposer()
        self._msg_source = MSGSource()

    def can_handle(self, message_class: str) -> bool:
        """Return True if items of *message_class* can be exported."""
        return message_class.startswith(("IPM.Note", "IPM.Contact"))

    def export(
        self,
        record: MessageRecord | ContactRecord,
        source_id: str | None = None,
    ) -> ExportResult:
        """Export a single record.

        Parameters
        ----------
        record:
            Message or contact snapshot from the mail-store reader.
        source_id:
            Caller's identifier for the item, used in logs and the result.

        Returns
        -------
        ExportResult
            The assembled result; failures are reported in ``errors``.
        """
        overall_start = time.monotonic()
        options = self._options
        source_id = source_id or str(uuid.uuid4())

        # ==============================================================
        # Step 1: Select Kind
        # ==============================================================
        if isinstance(record, MessageRecord):
            kind = ExportKind.EML
        elif isinstance(record, ContactRecord):
            kind = ExportKind.VCARD
        else:
            err = ConvertError(
                code=ErrorCode.E_ITEM_UNSUPPORTED,
                message=f"Unsupported record type {type(record).__name__}",
                stage="route",
            )
            return self._failed(source_id, None, [err], [], overall_start)

        # ==============================================================
        # Step 2: Pre-flight Scan
        # ==============================================================
        findings = self._scanner.scan(record)
        fatal_errors = [e for e in findings if e.code.value.startswith("E_")]
        warning_details = [e for e in findings if e.code.value.startswith("W_")]

        if fatal_errors:
            return self._failed(source_id, kind, fatal_errors, warning_details, overall_start)

        for warning in warning_details:
            logger.warning(
                "pstkit_export | source=%s | code=%s | detail=%s",
                source_id,
                warning.code.value,
                warning.message,
            )

        # ==============================================================
        # Step 3: Compose
        # ==============================================================
        try:
            if kind == ExportKind.EML:
                text = self._eml_composer.compose_text(record)  # type: ignore[arg-type]
            else:
                text = self._vcard_composer.compose(record)  # type: ignore[arg-type]
        except ConvertException as exc:
            return self._failed(source_id, kind, [exc.error], warning_details, overall_start)
        except SourceReadError as exc:
            err = ConvertError(
                code=ErrorCode.E_SOURCE_READ_FAILED,
                message=f"Record source failed: {exc}",
                stage="read",
            )
            return self._failed(source_id, kind, [err], warning_details, overall_start)

        # ==============================================================
        # Step 4: Assemble Result
        # ==============================================================
        content_hash = hashlib.sha256(text.encode("utf-8")).hexdigest()
        elapsed = time.monotonic() - overall_start

        if options.log_sample_data and isinstance(record, MessageRecord):
            logger.info(
                "pstkit_export | source=%s | kind=%s | subject=%r",
                source_id,
                kind.value,
                record.subject,
            )
        logger.info(
            "pstkit_export | source=%s | kind=%s | hash=%s | chars=%d | time=%.3fs",
            source_id,
            kind.value,
            content_hash[:8],
            len(text),
            elapsed,
        )

        return ExportResult(
            source_id=source_id,
            kind=kind,
            suffix=_SUFFIXES[kind],
            text=text,
            content_hash=content_hash,
            converter_version=options.converter_version,
            errors=[],
            warnings=[w.code.value for w in warning_details],
            error_details=warning_details,
            processing_time_seconds=elapsed,
        )

    def export_msg(self, file_path: str) -> ExportResult:
        """Read an Outlook ``.msg`` file and export the item it holds.

        A missing ``extract-msg`` install is reported as
        ``E_SOURCE_UNAVAILABLE``; an unreadable file as ``E_SOURCE_READ_FAILED``.
        """
        overall_start = time.monotonic()
        source_id = Path(file_path).name

        try:
            record = self._msg_source.open(file_path)
        except ImportError as exc:
            err = ConvertError(
                code=ErrorCode.E_SOURCE_UNAVAILABLE,
                message=str(exc),
                stage="read",
            )
            return self._failed(source_id, None, [err], [], overall_start)
        except SourceReadError as exc:
            err = ConvertError(
                code=ErrorCode.E_SOURCE_READ_FAILED,
                message=f"Record source failed: {exc}",
                stage="read",
            )
            return self._failed(source_id, None, [err], [], overall_start)

        if not self.can_handle(record.message_class):
            err = ConvertError(
                code=ErrorCode.E_ITEM_UNSUPPORTED,
                message=f"Unsupported message class {record.message_class}",
                stage="route",
            )
            return self._failed(source_id, None, [err], [], overall_start)

        return self.export(record, source_id=source_id)

    def export_to_file(
        self,
        record: MessageRecord | ContactRecord,
        output_dir: str,
        stem: str,
    ) -> ExportResult:
        """Export *record* and write it to ``output_dir/<stem><suffix>``.

        Nothing is written when the export fails or when *stem* would place
        the file outside *output_dir*.
        """
        result = self.export(record, source_id=stem)
        if not result.ok:
            return result

        path = Path(output_dir) / f"{stem}{result.suffix}"
        if path.resolve().parent != Path(output_dir).resolve():
            return self._write_failed(
                result, stem, f"Output name {stem!r} escapes {output_dir}"
            )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(result.text.encode("utf-8"))
        except OSError as exc:
            return self._write_failed(result, stem, f"Cannot write {path}: {exc}")

        return result.model_copy(update={"output_path": str(path)})

    def _write_failed(self, result: ExportResult, stem: str, detail: str) -> ExportResult:
        err = ConvertError(
            code=ErrorCode.E_OUTPUT_WRITE_FAILED,
            message=detail,
            stage="write",
        )
        logger.error(
            "pstkit_export | source=%s | code=%s | detail=%s",
            stem,
            err.code.value,
            detail,
        )
        return result.model_copy(
            update={
                "text": "",
                "content_hash": "",
                "errors": [err.code.value],
                "error_details": [err] + result.error_details,
            }
        )

    def _failed(
        self,
        source_id: str,
        kind: ExportKind | None,
        errors: list[ConvertError],
        warning_details: list[ConvertError],
        overall_start: float,
    ) -> ExportResult:
        elapsed = time.monotonic() - overall_start
        logger.error(
            "pstkit_export | source=%s | code=%s | detail=%s",
            source_id,
            errors[0].code.value,
            errors[0].message,
        )
        return ExportResult(
            source_id=source_id,
            kind=kind,
            converter_version=self._options.converter_version,
            errors=[e.code.value for e in errors],
            warnings=[w.code.value for w in warning_details],
            error_details=errors + warning_details,
            processing_time_seconds=elapsed,
        )


def create_default_router(**overrides) -> ExportRouter:
    """Create an ExportRouter from keyword overrides.

    Keys ``options``, ``boundaries`` and ``clock`` are passed to the router;
    any other key is treated as a :class:`ConversionOptions` field.
    """
    router_keys = {"options", "boundaries", "clock"}
    router_kwargs = {k: v for k, v in overrides.items() if k in router_keys}
    option_kwargs = {k: v for k, v in overrides.items() if k not in router_keys}

    options = router_kwargs.pop("options", None)
    if options is None:
        options = ConversionOptions(**option_kwargs)

    return ExportRouter(
        options=options,
        boundaries=router_kwargs.get("boundaries"),
        clock=router_kwargs.get("clock"),
    )
