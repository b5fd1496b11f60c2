import pytest

from profile_autofill.classification.upload_matcher import check_compatibility, cv_upload_targets, match_uploads
from profile_autofill.schemas.field_descriptor import DocumentMetadata, FieldDescriptor, FieldKind
from profile_autofill.schemas.field_mapping import UploadKind

PDF = DocumentMetadata(mime_type="application/pdf", size_bytes=200_000, file_name="jane_doe.pdf")
WORD = DocumentMetadata(mime_type="application/msword", size_bytes=200_000, file_name="jane_doe.doc")


def file_field(**kwargs):
    return FieldDescriptor(kind=FieldKind.FILE, **kwargs)


class TestCompatibility:
    """Accept list and size checks"""

    def test_mime_type_mismatch(self):
        ok, reason = check_compatibility(file_field(accepted_types=frozenset({"application/pdf"})), WORD)
        assert ok is False
        assert "application/msword" in reason

    def test_extension_entries(self):
        descriptor = file_field(accepted_types=frozenset({".pdf", ".docx"}))
        assert check_compatibility(descriptor, PDF) == (True, None)
        assert check_compatibility(descriptor, WORD)[0] is False

    def test_wildcards_and_no_constraints(self):
        assert check_compatibility(file_field(accepted_types=frozenset({"application/*"})), WORD)[0] is True
        assert check_compatibility(file_field(), WORD) == (True, None)

    def test_size_limit(self):
        ok, reason = check_compatibility(file_field(max_size_bytes=100_000), PDF)
        assert ok is False
        assert "exceeds" in reason

    def test_both_reasons_reported(self):
        descriptor = file_field(accepted_types=frozenset({"image/png"}), max_size_bytes=10)
        ok, reason = check_compatibility(descriptor, PDF)
        assert ok is False
        assert "; " in reason


class TestMatchUploads:
    """Semantic labels for file inputs"""

    def test_incompatible_even_with_high_confidence(self):
        descriptor = file_field(name="resume", accepted_types=frozenset({"application/pdf"}))
        mapping = match_uploads([descriptor], WORD)[0]
        assert mapping.upload_kind == UploadKind.CV_RESUME
        assert mapping.confidence >= 0.9
        assert mapping.compatibility_ok is False
        assert mapping.incompatibility_reason

    def test_every_cv_field_returned(self):
        descriptors = [
            file_field(name="resume", position=0),
            file_field(label_text="Upload your CV", position=1),
            file_field(name="cover_letter", position=2),
        ]
        mappings = match_uploads(descriptors, PDF)
        assert [m.upload_kind for m in mappings] == [UploadKind.CV_RESUME, UploadKind.CV_RESUME, UploadKind.COVER_LETTER]
        assert len(cv_upload_targets(mappings)) == 2

    def test_unrecognized_field_is_other(self):
        mapping = match_uploads([file_field(name="field_7")], PDF)[0]
        assert mapping.upload_kind == UploadKind.OTHER
        assert mapping.confidence == 0.0

    def test_generic_attachment(self):
        mapping = match_uploads([file_field(label_text="Attachment")], PDF)[0]
        assert mapping.upload_kind == UploadKind.OTHER
        assert mapping.confidence == pytest.approx(0.75)

    def test_non_file_descriptors_ignored(self):
        assert match_uploads([FieldDescriptor(name="resume")], PDF) == []

    def test_incompatible_cv_field_not_a_target(self):
        descriptor = file_field(name="resume", max_size_bytes=1000)
        mappings = match_uploads([descriptor], PDF)
        assert cv_upload_targets(mappings) == []
