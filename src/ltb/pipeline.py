# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""File pipeline orchestration for legacy object documentation."""

import json
import logging
import os
import shutil
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal

from ltb.errors import (
    FileStage,
    InvalidInputError,
    NoJsonFoundError,
    PipelineError,
    StorageError,
)
from ltb.extractor import extract_json
from ltb.llm_client import ModelGateway
from ltb.model import Output
from ltb.request_builder import build_prompt, parse_analysis_request
from ltb.schema_mapper import map_response, to_output

logger = logging.getLogger(__name__)

FileStatus = Literal["succeeded", "failed"]


@dataclass(frozen=True)
class FileResult:
    """Represent the outcome of one input file.

    Attributes:
        file_path: Input file path.
        status: ``succeeded`` or ``failed``.
        stage: Last stage reached on success, failing stage otherwise.
        output_path: Written documentation record; ``None`` on failure.
        archive_path: Archived input file; ``None`` on failure.
        error_kind: Error kind name for failures.
        error_message: Error detail for failures.
    """

    file_path: str
    status: FileStatus
    stage: FileStage
    output_path: str | None = None
    archive_path: str | None = None
    error_kind: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class ProcessingReport:
    """Aggregate per-file outcomes of one batch run."""

    results: list[FileResult] = field(default_factory=list)

    @property
    def discovered(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.status == "succeeded")

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if result.status == "failed")

    def to_dict(self) -> dict[str, Any]:
        return {
            "discovered": self.discovered,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "results": [asdict(result) for result in self.results],
        }


class FilePipeline:
    """Drive input documents through prompt, model, extraction and mapping."""

    def __init__(
        self,
        gateway: ModelGateway,
        enterprise_domains_json: str,
        prompt_template: str,
        model_id: str,
        max_tokens: int,
    ) -> None:
        """Initialize the pipeline.

        Args:
            gateway: Model gateway used for completions.
            enterprise_domains_json: Shared domain taxonomy, loaded once per run.
            prompt_template: Instruction text placed before each payload.
            model_id: Provider model identifier.
            max_tokens: Maximum tokens generated per reply.

        Raises:
            ValueError: If ``max_tokens`` is not greater than zero.
        """
        if max_tokens <= 0:
            raise ValueError("max_tokens must be > 0")
        self._gateway = gateway
        self._enterprise_domains_json = enterprise_domains_json
        self._prompt_template = prompt_template
        self._model_id = model_id
        self._max_tokens = max_tokens

    def process_all(
        self, source_dir: Path, output_dir: Path, archive_dir: Path
    ) -> ProcessingReport:
        """Process every regular file directly inside ``source_dir``.

        Per-file failures are recorded in the report and never stop the batch.

        Args:
            source_dir: Folder holding input documents.
            output_dir: Folder receiving documentation records.
            archive_dir: Folder receiving processed input documents.

        Returns:
            Batch report with one result per discovered file.
        """
        files = sorted(path for path in source_dir.iterdir() if path.is_file())
        logger.info(f"Found files to process (source_dir={source_dir} count={len(files)})")

        results = [
            self.process_file(path, output_dir=output_dir, archive_dir=archive_dir)
            for path in files
        ]
        report = ProcessingReport(results=results)
        logger.info(
            "batch_completed discovered=%s succeeded=%s failed=%s",
            report.discovered,
            report.succeeded,
            report.failed,
        )
        return report

    def process_file(
        self, file_path: Path, output_dir: Path, archive_dir: Path
    ) -> FileResult:
        """Run the full pipeline for one input file.

        On success the record is written to ``output_dir/<stem>.json`` and the
        input moved into ``archive_dir``. On failure the input stays in place
        and no output file remains.

        Args:
            file_path: Input document path.
            output_dir: Folder receiving the documentation record.
            archive_dir: Folder receiving the processed input.

        Returns:
            Outcome of this file.
        """
        output_path = output_dir / f"{file_path.stem}.json"
        archive_path = archive_dir / file_path.name
        logger.info(f"Processing file (file_path={file_path})")
        try:
            output = self._analyze(file_path)
            _write_output_atomic(output, output_path)
            logger.info(f"Output written (file_path={file_path} output_path={output_path})")
            try:
                _archive(file_path, archive_path)
            except StorageError:
                output_path.unlink(missing_ok=True)
                raise
            logger.info(f"File archived (file_path={file_path} archive_path={archive_path})")
        except PipelineError as exc:
            logger.warning(
                f"Failed to process file (file_path={file_path} stage={exc.stage} "
                f"kind={exc.kind} error={exc})"
            )
            return FileResult(
                file_path=str(file_path),
                status="failed",
                stage=exc.stage,
                error_kind=exc.kind,
                error_message=str(exc),
            )
        return FileResult(
            file_path=str(file_path),
            status="succeeded",
            stage="archived",
            output_path=str(output_path),
            archive_path=str(archive_path),
        )

    def _analyze(self, file_path: Path) -> Output:
        """Read, request, extract and map one file into an output record."""
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InvalidInputError(f"Failed to read input file: {exc}") from exc
        request = parse_analysis_request(text)

        prompt = build_prompt(
            metadata=request.metadata,
            source_code=request.source_code,
            enterprise_domains_json=self._enterprise_domains_json,
            prompt_template=self._prompt_template,
        )
        reply = self._gateway.complete(prompt, self._max_tokens, self._model_id)
        logger.debug(f"Model reply received (file_path={file_path} reply={reply!r})")

        json_text = extract_json(reply)
        if json_text is None:
            raise NoJsonFoundError("Model reply does not contain a JSON object.")
        return to_output(map_response(json_text))


def _write_output_atomic(output: Output, output_path: Path) -> None:
    """Write the record as indented JSON through a temp file and rename.

    Raises:
        StorageError: If the record cannot be written.
    """
    temp_name: str | None = None
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(output_path.parent),
            prefix=f".{output_path.stem}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_name = handle.name
            json.dump(output.to_dict(), handle, indent=2, ensure_ascii=False)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, output_path)
    except (OSError, ValueError) as exc:
        if temp_name is not None:
            Path(temp_name).unlink(missing_ok=True)
        raise StorageError(
            f"Failed to write output file {output_path}: {exc}", stage="written"
        ) from exc


def _archive(file_path: Path, archive_path: Path) -> None:
    """Move the input into the archive, replacing an earlier entry.

    Raises:
        StorageError: If the file cannot be moved.
    """
    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        if archive_path.exists():
            archive_path.unlink()
        shutil.move(str(file_path), str(archive_path))
    except OSError as exc:
        raise StorageError(
            f"Failed to archive {file_path}: {exc}", stage="archived"
        ) from exc
