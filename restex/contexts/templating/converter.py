"""
Resume JSON -> LaTeX / Plain Text Converter

Orchestration for the whole pipeline:

    raw JSON -> clean -> normalize -> {compile_document, project_plaintext}

This module exports:
- In-memory pipeline: build_artifacts
- Round-trip check: validate_roundtrip (compile -> parse -> compare plain text)
- File orchestration: generate_resume (logging, output files, timing)
- Input guards and naming helpers: check_input_size, slugify_filename
"""

import json
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from omegaconf import OmegaConf

from restex.contexts.intake.cleaner import clean
from restex.contexts.intake.exceptions import OversizedInputError
from restex.contexts.intake.normalizer import normalize
from restex.contexts.templating.exceptions import DocumentParseError
from restex.contexts.templating.latex_generator import compile_document, printable_model
from restex.contexts.templating.latex_parser import parse_latex
from restex.contexts.templating.logger import (
    _log_debug,
    _log_error,
    log_generation_result,
    log_generation_start,
    log_roundtrip_result,
    setup_templating_logger,
)
from restex.contexts.templating.plaintext_formatter import project_plaintext
from restex.contexts.templating.resume_data_structure import (
    Contact,
    Education,
    Experience,
    Project,
    ResumeModel,
)
from restex.contexts.templating.sanitizer import rendered_text
from restex.utils.settings import get_logs_path, get_settings
from restex.utils.text_processing import get_line_diff
from restex.utils.timestamp import now

OUTPUT_SUFFIX = "_ats_optimized"
FALLBACK_FILENAME = "resume"


# Result dataclasses for orchestration functions


@dataclass(frozen=True)
class ResumeArtifacts:
    """Everything one pipeline run produces in memory."""

    model: ResumeModel
    latex: str
    plaintext: str


@dataclass
class RoundtripResult:
    """Result from validate_roundtrip()."""

    success: bool
    num_diffs: int = 0
    diff_lines: List[str] = field(default_factory=list)


@dataclass
class ConversionResult:
    """Result from generate_resume() orchestration function."""

    success: bool
    input_path: Optional[Path] = None
    latex_path: Optional[Path] = None
    plaintext_path: Optional[Path] = None
    error: Optional[str] = None
    time_s: float = 0.0
    log_dir: Optional[Path] = None
    # Validation results
    roundtrip_diffs: Optional[int] = None


def check_input_size(raw: Any, max_bytes: Optional[int] = None) -> int:
    """
    Reject raw input whose JSON serialization exceeds the size cap.

    Args:
        raw: Deserialized resume JSON
        max_bytes: Cap in bytes (default: intake.max_input_bytes setting)

    Returns:
        Size of the serialized input in bytes

    Raises:
        OversizedInputError: If the input is larger than the cap
    """
    if max_bytes is None:
        max_bytes = get_settings().intake.max_input_bytes

    size_bytes = len(json.dumps(raw, ensure_ascii=False, default=str).encode("utf-8"))
    if size_bytes > max_bytes:
        raise OversizedInputError(size_bytes=size_bytes, max_bytes=max_bytes)
    return size_bytes


def slugify_filename(name: str) -> str:
    """
    Safe output file stem for a resume owner's name.

    Example:
        >>> slugify_filename("Ada Lovelace")
        'ada_lovelace'
        >>> slugify_filename("")
        'resume'
    """
    slug = re.sub(r"[^A-Za-z0-9_-]", "_", name.strip()).lower()
    return slug if slug.strip("_") else FALLBACK_FILENAME


def build_artifacts(raw: Any) -> ResumeArtifacts:
    """
    Run the in-memory pipeline on deserialized resume JSON.

    Raises:
        OversizedInputError: If the input exceeds the size cap
        MalformedInputError: If the root value is not an object
    """
    check_input_size(raw)
    model = normalize(clean(raw))
    return ResumeArtifacts(
        model=model,
        latex=compile_document(model),
        plaintext=project_plaintext(model),
    )


# ============================================================================
# Round-trip validation
# ============================================================================


def _rendered_items(items) -> tuple:
    return tuple(rendered_text(item) for item in items)


def rendered_view(model: ResumeModel) -> ResumeModel:
    """
    The model as the compiled document shows it.

    Values the sanitizer empties are left out the way the compiler leaves
    them out, every other value goes through escape and back. Fields the
    document does not render (experience tags, project links) are dropped.
    """
    model = printable_model(model)
    contacts = tuple(
        Contact(kind=contact.kind, value=rendered_text(contact.value)) for contact in model.contacts
    )
    return ResumeModel(
        name=rendered_text(model.name),
        title=rendered_text(model.title),
        location=rendered_text(model.location),
        contacts=contacts,
        education=tuple(
            Education(
                degree=rendered_text(entry.degree),
                institution=rendered_text(entry.institution),
                location=rendered_text(entry.location),
                dates=rendered_text(entry.dates),
                details=_rendered_items(entry.details),
            )
            for entry in model.education
        ),
        experience=tuple(
            Experience(
                position=rendered_text(entry.position),
                company=rendered_text(entry.company),
                location=rendered_text(entry.location),
                dates=rendered_text(entry.dates),
                highlights=_rendered_items(entry.highlights),
            )
            for entry in model.experience
        ),
        skills=_rendered_items(model.skills),
        projects=tuple(
            Project(
                name=rendered_text(project.name),
                description=rendered_text(project.description),
                technologies=_rendered_items(project.technologies),
            )
            for project in model.projects
        ),
    )


def validate_roundtrip(model: ResumeModel) -> RoundtripResult:
    """
    Check that the compiled document carries the model's data.

    Steps:
    1. Compile the model to LaTeX
    2. Parse the LaTeX back into a model
    3. Project both the parsed model and the rendered view of the original
    4. Compare the two plain texts line by line

    Plain text is compared rather than models so that contact kinds (which the
    document does not record) and list splitting do not count as differences.

    Returns:
        RoundtripResult; success means zero differing lines
    """
    latex = compile_document(model)
    try:
        parsed = parse_latex(latex)
    except DocumentParseError as e:
        _log_error(f"Generated LaTeX could not be read back: {e}")
        return RoundtripResult(success=False, num_diffs=1, diff_lines=str(e).split("\n"))

    diff_lines, num_diffs = get_line_diff(
        project_plaintext(rendered_view(model)),
        project_plaintext(parsed),
    )
    return RoundtripResult(success=num_diffs == 0, num_diffs=num_diffs, diff_lines=diff_lines)


# ============================================================================
# File orchestration
# ============================================================================


def load_resume_file(input_path: Path) -> Any:
    """
    Read raw resume data from a .json or .yaml/.yml file.

    Raises:
        ValueError: If the file extension is not supported
    """
    suffix = input_path.suffix.lower()
    if suffix == ".json":
        return json.loads(input_path.read_text(encoding="utf-8"))
    if suffix in (".yaml", ".yml"):
        return OmegaConf.to_container(OmegaConf.load(input_path), resolve=True)
    raise ValueError(f"Unsupported file type: {suffix}. Must be .json, .yaml or .yml")


def generate_resume(
    input_path: Path,
    output_dir: Path,
    validate: bool = True,
    log_dir: Optional[Path] = None,
) -> ConversionResult:
    """
    Generate the ATS LaTeX and plain-text resumes for one input file.

    Handles:
    1. Setup session logging
    2. Read and size-check the input
    3. Clean, normalize, compile and project
    4. Optionally validate the round trip
    5. Write <slug>_ats_optimized.tex and .txt, only if every step succeeded

    Args:
        input_path: Raw resume JSON (or YAML) file
        output_dir: Directory for the two output files
        validate: Run the round-trip check before writing
        log_dir: Session log directory (default: LOGS_PATH/generate_<timestamp>)

    Returns:
        ConversionResult with success status, paths, validation info, and timing
    """
    start_time = time.time()

    if log_dir is None:
        log_dir = get_logs_path() / f"generate_{now()}"
    log_file = setup_templating_logger(log_dir, phase="generate")
    log_generation_start(input_path.stem, input_path, log_file)

    result = ConversionResult(success=False, input_path=input_path, log_dir=log_dir)
    resume_name = input_path.stem

    try:
        raw = load_resume_file(input_path)
        artifacts = build_artifacts(raw)
        resume_name = slugify_filename(artifacts.model.name or input_path.stem)

        if validate:
            roundtrip = validate_roundtrip(artifacts.model)
            log_roundtrip_result(roundtrip)
            result.roundtrip_diffs = roundtrip.num_diffs
            if not roundtrip.success:
                raise ValueError(
                    f"Roundtrip validation failed with {roundtrip.num_diffs} differing lines"
                )

        output_dir.mkdir(parents=True, exist_ok=True)
        latex_path = output_dir / f"{resume_name}{OUTPUT_SUFFIX}.tex"
        plaintext_path = output_dir / f"{resume_name}{OUTPUT_SUFFIX}.txt"
        latex_path.write_text(artifacts.latex, encoding="utf-8")
        plaintext_path.write_text(artifacts.plaintext, encoding="utf-8")
        _log_debug(f"Wrote {len(artifacts.latex)} LaTeX chars, {len(artifacts.plaintext)} text chars")

        result.success = True
        result.latex_path = latex_path
        result.plaintext_path = plaintext_path
    except Exception as e:
        result.error = str(e)

    result.time_s = time.time() - start_time
    log_generation_result(resume_name, result, result.time_s)
    return result
