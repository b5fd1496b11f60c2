from profile_autofill.schemas.field_descriptor import FieldKind
from profile_autofill.services.descriptor_builder import (
    build_descriptor,
    build_descriptors,
    extract_max_file_size,
    parse_accept_attribute,
)
from profile_autofill.services.text_cleaner import clean_fragment, normalize_label


class TestBuildDescriptor:
    """Raw element snapshots to FieldDescriptors"""

    def test_text_input(self):
        descriptor = build_descriptor(
            {"tag": "input", "type": "text", "name": "firstName", "label": "<span>First Name</span> *"}
        )
        assert descriptor.kind == FieldKind.TEXT
        assert descriptor.name == "firstName"
        assert descriptor.label_text == "First Name"

    def test_input_kinds(self):
        assert build_descriptor({"tag": "input", "type": "email"}).kind == FieldKind.EMAIL
        assert build_descriptor({"tag": "input", "type": "tel"}).kind == FieldKind.TEL
        assert build_descriptor({"tag": "textarea", "rows": "8"}).kind == FieldKind.TEXTAREA
        assert build_descriptor({"tag": "select"}).kind == FieldKind.SELECT
        assert build_descriptor({"tag": "input"}).kind == FieldKind.TEXT

    def test_unfillable_elements_skipped(self):
        assert build_descriptor({"tag": "input", "type": "checkbox"}) is None
        assert build_descriptor({"tag": "button"}) is None
        assert build_descriptor({"tag": "input", "type": "text", "hidden": True}) is None
        assert build_descriptor({"tag": "input", "type": "text", "disabled": "disabled"}) is None
        assert build_descriptor({"tag": "input", "type": "text", "readonly": True}) is None
        assert build_descriptor({"tag": "input", "type": "text", "visible": False}) is None

    def test_hidden_file_input_kept(self):
        descriptor = build_descriptor({"tag": "input", "type": "file", "hidden": True, "accept": ".pdf"})
        assert descriptor.kind == FieldKind.FILE
        assert descriptor.accepted_types == frozenset({".pdf"})

    def test_textarea_size(self):
        descriptor = build_descriptor({"tag": "textarea", "rows": "3", "maxlength": "200"})
        assert (descriptor.rows, descriptor.max_length) == (3, 200)

    def test_file_size_from_context(self):
        descriptor = build_descriptor(
            {"tag": "input", "type": "file", "context": "PDF or DOCX, max 5MB"}
        )
        assert descriptor.max_size_bytes == 5 * 1024 * 1024

    def test_positions_follow_fillable_order(self):
        descriptors = build_descriptors(
            [
                {"tag": "input", "type": "text", "name": "a"},
                {"tag": "input", "type": "hidden", "name": "csrf"},
                {"tag": "input", "type": "text", "name": "b"},
            ]
        )
        assert [(d.name, d.position) for d in descriptors] == [("a", 0), ("b", 1)]


class TestAttributeParsing:
    def test_parse_accept_attribute(self):
        assert parse_accept_attribute(".PDF, Application/MSWord ,") == frozenset({".pdf", "application/msword"})
        assert parse_accept_attribute(None) == frozenset()

    def test_max_size_attribute_wins(self):
        assert extract_max_file_size({"data-max-size": "1048576"}, "max 10 MB") == 1048576

    def test_max_size_text_variants(self):
        assert extract_max_file_size({}, "Files up to 10 MB") == 10 * 1024 * 1024
        assert extract_max_file_size({}, "2 MB maximum") == 2 * 1024 * 1024
        assert extract_max_file_size({}, "limit: 500KB") == 500 * 1024
        assert extract_max_file_size({}, "Upload your resume") is None


class TestTextCleaner:
    def test_clean_fragment(self):
        assert clean_fragment("<label>Email&nbsp;Address <b>*</b></label>") == "Email Address"

    def test_normalize_label(self):
        assert normalize_label("E-mail Address *") == "e mail address"
